"""
Step 3 Statistics module for the Gradesheet Analyzer.
"""

from .stats_logic import compute_component_averages, compute_branch_averages

__all__ = [
    'compute_component_averages',
    'compute_branch_averages'
]
