"""
Step 1 Ingest module for the Gradesheet Analyzer.
Reads gradesheet files and parses rows into Student records.
"""

from .ingest_logic import read_gradesheet_rows, parse_rows, load_gradesheet

__all__ = [
    'read_gradesheet_rows',
    'parse_rows',
    'load_gradesheet'
]
