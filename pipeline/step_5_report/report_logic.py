"""
Report rendering and export for the Gradesheet Analyzer.
Turns the stage results into console lines and writes the structured export.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from common import constants, storage
from common.errors import ExportError
from common.schemas import RankingEntry, Student
from common.utils import format_score

# Configure logging for this module
logger = logging.getLogger(__name__)

NO_DATA_LINE = "No data to average."


def _ranking_lines(entries: Sequence[RankingEntry]) -> List[str]:
    return [
        f"{entry.position}. EmpID: {entry.emp_id} | Computed Total: {format_score(entry.total)}"
        for entry in entries
    ]


def render_console_lines(mismatches: Sequence[str],
                         component_averages: Optional[Dict[str, float]],
                         branch_averages: Optional[Dict[str, float]],
                         overall_top: Sequence[RankingEntry],
                         branch_top: Dict[str, List[RankingEntry]],
                         row_warnings: Sequence[str] = (),
                         top_n: int = constants.TOP_N) -> List[str]:
    """
    Render every result section as console lines.

    Averages passed as None are shown as the no-data condition. An empty
    string in the output stands for a blank line.

    Returns:
        Lines in print order
    """
    lines: List[str] = list(row_warnings)

    lines += ["", "Validation Errors:"]
    if mismatches:
        lines += list(mismatches)
    else:
        lines.append("No validation errors found.")

    lines += ["", "Average Marks per Component:"]
    if component_averages is None:
        lines.append(NO_DATA_LINE)
    else:
        lines += [f"{component}: {format_score(avg)}" for component, avg in component_averages.items()]

    lines += ["", "Branch-wise Averages:"]
    if branch_averages is None:
        lines.append(NO_DATA_LINE)
    else:
        lines += [f"Branch {branch}: {format_score(avg)}" for branch, avg in branch_averages.items()]

    lines += ["", f"Overall Top {top_n} Students:"]
    lines += _ranking_lines(overall_top)

    lines += ["", f"Top {top_n} Students per Branch:"]
    for branch, entries in branch_top.items():
        lines += ["", f"Branch {branch}:"]
        lines += _ranking_lines(entries)

    return lines


def build_export_payload(students: Sequence[Student], mismatches: Sequence[str]) -> Dict[str, Any]:
    """Full record list plus mismatch messages, keyed the way the gradesheet names them."""
    return {
        "students": [student.model_dump(by_alias=True) for student in students],
        "mismatches": list(mismatches),
    }


def export_report(students: Sequence[Student], mismatches: Sequence[str],
                  output_path: Union[str, Path] = constants.DEFAULT_EXPORT_FILENAME) -> Path:
    """
    Write the structured export, pretty-printed.

    Args:
        students: All parsed records
        mismatches: Validation messages
        output_path: Destination file (default: output.json)

    Returns:
        Path of the written file

    Raises:
        ExportError: If the file cannot be created or written
    """
    payload = build_export_payload(students, mismatches)
    try:
        written = storage.write_json_atomic(output_path, payload)
    except IOError as e:
        logger.error(f"Export to {output_path} failed: {str(e)}")
        raise ExportError(
            f"Error creating JSON file: {str(e)}",
            context={"output_path": str(output_path)}
        ) from e

    logger.info(f"Exported {len(students)} records to {written}")
    return written
