"""
Descriptive statistics for the Gradesheet Analyzer.
Computes per-component averages over all records and per-branch averages of
the computed total.
"""

import logging
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from common import constants
from common.errors import NoDataError
from common.schemas import Student

# Configure logging for this module
logger = logging.getLogger(__name__)


def _ordered_components(columns: Iterable[str]) -> List[str]:
    """Fixed components first, then Final Total, then anything else as first seen."""
    columns = list(columns)
    known = [c for c in constants.COMPONENTS + [constants.FINAL_TOTAL] if c in columns]
    return known + [c for c in columns if c not in known]


def compute_component_averages(students: Sequence[Student]) -> Dict[str, float]:
    """
    Average every mark key over all records.

    Each key found in any record's marks (including Final Total) is summed
    across all records and divided by the record count; a record without the
    key contributes 0.

    Args:
        students: Parsed records

    Returns:
        Mapping of component name to average, in gradesheet column order

    Raises:
        NoDataError: If there are no records to average
    """
    if not students:
        raise NoDataError(context={"statistic": "component_averages"})

    marks_df = pd.DataFrame([student.marks for student in students]).fillna(0.0)
    sums = marks_df.sum(axis=0)
    count = len(students)

    averages = {
        component: float(sums[component]) / count
        for component in _ordered_components(marks_df.columns)
    }
    logger.info(f"Computed averages for {len(averages)} components over {count} records")
    return averages


def compute_branch_averages(students: Sequence[Student]) -> Dict[str, float]:
    """
    Average the computed total per branch.

    Every record's total is recomputed first. Branch codes are used exactly
    as parsed.

    Args:
        students: Parsed records; their total field is updated in place

    Returns:
        Mapping of branch code to average total, sorted by branch code

    Raises:
        NoDataError: If there are no records to average
    """
    if not students:
        raise NoDataError(context={"statistic": "branch_averages"})

    for student in students:
        student.compute_total()

    totals_df = pd.DataFrame({
        "branch": [student.branch for student in students],
        "total": [student.total for student in students],
    })
    means = totals_df.groupby("branch", sort=True)["total"].mean()

    averages = {branch: float(avg) for branch, avg in means.items()}
    logger.info(f"Computed branch averages for {len(averages)} branches")
    return averages
