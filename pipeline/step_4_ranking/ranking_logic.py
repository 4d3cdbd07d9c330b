"""
Rankings for the Gradesheet Analyzer.
Orders records by computed total, overall and within each branch.

Ties on total are broken by EmpID ascending; records tied on both keep their
input order (the sort is stable), so rankings are reproducible.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from common import constants
from common.schemas import RankingEntry, Student

# Configure logging for this module
logger = logging.getLogger(__name__)


def compute_totals(students: Sequence[Student]) -> None:
    """Recompute the total of every record in place."""
    for student in students:
        student.compute_total()


def _ranking_key(student: Student):
    return (-student.total, student.emp_id)


def _top_entries(students: Sequence[Student], top_n: int) -> List[RankingEntry]:
    ordered = sorted(students, key=_ranking_key)
    return [
        RankingEntry(position=position, emp_id=student.emp_id,
                     branch=student.branch, total=student.total)
        for position, student in enumerate(ordered[:top_n], start=1)
    ]


def rank_overall(students: Sequence[Student], top_n: int = constants.TOP_N) -> List[RankingEntry]:
    """
    Top records by total, highest first.

    Totals are recomputed before ranking. The input sequence is not reordered.

    Args:
        students: Parsed records
        top_n: Maximum number of entries (default: 3)

    Returns:
        Up to top_n ranking entries
    """
    compute_totals(students)
    return _top_entries(students, top_n)


def rank_by_branch(students: Sequence[Student],
                   top_n: int = constants.TOP_N) -> Dict[str, List[RankingEntry]]:
    """
    Top records by total within each branch.

    Args:
        students: Parsed records
        top_n: Maximum number of entries per branch (default: 3)

    Returns:
        Mapping of branch code (sorted) to its ranking entries
    """
    compute_totals(students)

    by_branch: Dict[str, List[Student]] = defaultdict(list)
    for student in students:
        by_branch[student.branch].append(student)

    rankings = {branch: _top_entries(by_branch[branch], top_n) for branch in sorted(by_branch)}
    logger.info(f"Ranked {len(students)} records across {len(rankings)} branches")
    return rankings
