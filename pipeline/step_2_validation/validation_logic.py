"""
Consistency validation for the Gradesheet Analyzer.
Checks the two arithmetic relationships every gradesheet row should satisfy
and reports each violation as a mismatch message.

The per-record checks are independent, so the pass fans out over a thread
pool and joins on every worker before the messages are returned.
"""

import math
import os
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence

from common import constants
from common.errors import ValidationCancelled
from common.schemas import Student

# Configure logging for this module
logger = logging.getLogger(__name__)

PRE_COMPRE_CHECK = "+".join(constants.COLUMN_LETTERS[c] for c in constants.PRE_COMPRE_PARTS)
FINAL_TOTAL_CHECK = (
    f"{constants.COLUMN_LETTERS[constants.PRE_COMPRE]}+{constants.COLUMN_LETTERS[constants.COMPRE]}"
)


def _differs(expected: float, actual: float, tolerance: float) -> bool:
    # tolerance 0.0 keeps exact float equality
    if tolerance == 0.0:
        return expected != actual
    return abs(expected - actual) > tolerance


def check_student(student: Student, tolerance: float = 0.0) -> List[str]:
    """
    Check one record against both invariants.

    1. Quiz + Mid-Sem + Lab Test + Weekly Labs == Pre-Compre
    2. Pre-Compre + Compre == Final Total (only when a Final Total entry exists)

    Missing component entries read as 0.0.

    Args:
        student: Record to check (not modified)
        tolerance: Allowed absolute difference; 0.0 means exact equality

    Returns:
        Zero, one or two mismatch messages
    """
    messages = []

    expected_pre_compre = 0.0
    for component in constants.PRE_COMPRE_PARTS:
        expected_pre_compre += student.mark(component)
    if _differs(expected_pre_compre, student.mark(constants.PRE_COMPRE), tolerance):
        messages.append(
            f"Mismatch in {PRE_COMPRE_CHECK} != {constants.COLUMN_LETTERS[constants.PRE_COMPRE]} "
            f"for EmpID {student.emp_id}"
        )

    expected_total = student.mark(constants.PRE_COMPRE) + student.mark(constants.COMPRE)
    actual_total = student.marks.get(constants.FINAL_TOTAL)
    if actual_total is not None and _differs(expected_total, actual_total, tolerance):
        messages.append(
            f"Mismatch in {FINAL_TOTAL_CHECK} != {constants.COLUMN_LETTERS[constants.FINAL_TOTAL]} "
            f"for EmpID {student.emp_id} (Expected: {expected_total:.2f}, Found: {actual_total:.2f})"
        )

    return messages


def _check_chunk(chunk: Sequence[Student], tolerance: float,
                 cancel_event: Optional[threading.Event]) -> List[str]:
    messages = []
    for student in chunk:
        if cancel_event is not None and cancel_event.is_set():
            break
        messages.extend(check_student(student, tolerance))
    return messages


def _default_workers() -> int:
    # Same default as ThreadPoolExecutor
    return min(32, (os.cpu_count() or 1) + 4)


def run_validation(students: Sequence[Student],
                   max_workers: Optional[int] = None,
                   tolerance: float = 0.0,
                   cancel_event: Optional[threading.Event] = None) -> List[str]:
    """
    Validate every record, fanning the checks out over worker threads.

    Records are split into one contiguous chunk per worker. The call blocks
    until every worker has finished, then returns the merged messages. The
    order of the messages is not significant.

    Args:
        students: Records to validate (read-only for the workers)
        max_workers: Number of worker threads (default: executor default)
        tolerance: Allowed absolute difference; 0.0 means exact equality
        cancel_event: Optional event; once set, workers stop picking up records

    Returns:
        List of mismatch messages

    Raises:
        ValidationCancelled: If cancel_event was set before the pass finished
    """
    if not students:
        return []

    workers = min(max_workers or _default_workers(), len(students))
    chunk_size = math.ceil(len(students) / workers)
    chunks = [students[i:i + chunk_size] for i in range(0, len(students), chunk_size)]

    logger.info(f"Validating {len(students)} records across {len(chunks)} workers")

    mismatches: List[str] = []
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gradesheet_validate") as executor:
        futures = [executor.submit(_check_chunk, chunk, tolerance, cancel_event) for chunk in chunks]
        for future in as_completed(futures):
            mismatches.extend(future.result())

    if cancel_event is not None and cancel_event.is_set():
        raise ValidationCancelled(
            "Validation cancelled before all records were checked",
            context={"records": len(students), "mismatches_so_far": len(mismatches)}
        )

    logger.info(f"Validation found {len(mismatches)} mismatches")
    return mismatches
