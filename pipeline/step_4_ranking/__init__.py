"""
Step 4 Ranking module for the Gradesheet Analyzer.
"""

from .ranking_logic import compute_totals, rank_overall, rank_by_branch

__all__ = [
    'compute_totals',
    'rank_overall',
    'rank_by_branch'
]
