"""
Step 2 Validation module for the Gradesheet Analyzer.
Checks the Pre-Compre and Final Total sums of every record.
"""

from .validation_logic import check_student, run_validation

__all__ = [
    'check_student',
    'run_validation'
]
