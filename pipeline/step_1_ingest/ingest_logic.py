"""
Core ingestion logic for the Gradesheet Analyzer.
Reads the first sheet of a gradesheet into raw string rows and parses those
rows into typed Student records.
"""

import csv
import math
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

import pandas as pd

from common import constants
from common.errors import IngestionError, raise_file_not_found, raise_unsupported_file_type
from common.schemas import CellParseWarning, IngestionResult, Student

# Configure logging for this module
logger = logging.getLogger(__name__)

# Plain decimal or exponent notation, ASCII digits only, no surrounding whitespace
SCORE_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Score columns in sheet order, the declared total last
SCORE_COLUMNS: List[Tuple[int, str]] = [
    (constants.COMPONENT_START_COLUMN + offset, component)
    for offset, component in enumerate(constants.COMPONENTS)
] + [(constants.FINAL_TOTAL_COLUMN, constants.FINAL_TOTAL)]


def _cell_to_text(value: Any) -> str:
    """
    Render a cell the way a spreadsheet reader reports it.

    Blank cells become "", integral floats lose their ".0" suffix.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def _trim_trailing_blanks(row: List[str]) -> List[str]:
    end = len(row)
    while end > 0 and row[end - 1] == "":
        end -= 1
    return row[:end]


def _csv_width(path: Path) -> int:
    """Largest field count over all lines of a csv file."""
    with open(path, newline="", encoding="utf-8") as f:
        return max((len(record) for record in csv.reader(f)), default=0)


def _dataframe_to_rows(df: pd.DataFrame) -> List[List[str]]:
    rows = []
    for values in df.itertuples(index=False, name=None):
        rows.append(_trim_trailing_blanks([_cell_to_text(v) for v in values]))
    return rows


def read_gradesheet_rows(file_path: Union[str, Path]) -> List[List[str]]:
    """
    Read the first sheet of a gradesheet as rows of cell strings.

    No header inference is done: row 0 of the result is the sheet's header row.
    Excel workbooks (.xlsx/.xlsm) and csv files are supported.

    Args:
        file_path: Path to the gradesheet

    Returns:
        List of rows, each a list of cell strings with trailing blanks trimmed

    Raises:
        IngestionError: If the file is missing, unsupported or unreadable
    """
    path = Path(file_path)

    if not path.is_file():
        raise_file_not_found(str(path))

    suffix = path.suffix.lower()
    if suffix not in constants.SUPPORTED_EXTENSIONS:
        raise_unsupported_file_type(str(path), suffix)

    logger.info(f"Loading gradesheet: {path}")

    try:
        if suffix in constants.EXCEL_EXTENSIONS:
            df = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
        else:
            # Lines may differ in length; size the frame for the widest one
            df = pd.read_csv(
                path,
                header=None,
                names=list(range(_csv_width(path))),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
            )
    except Exception as e:
        raise IngestionError(
            f"Error opening the file: {str(e)}",
            context={"path": str(path), "error_type": type(e).__name__}
        ) from e

    rows = _dataframe_to_rows(df)
    logger.info(f"Read {len(rows)} rows from {path.name}")
    return rows


def parse_score(raw_value: Any) -> Optional[float]:
    """
    Parse a score cell.

    Only plain decimal or exponent notation is accepted. Surrounding
    whitespace, digit separators, non-ASCII digits and values that are not
    finite (nan, inf, overflow such as 1e500) count as non-numeric.

    Returns:
        The float value, or None when the cell is not numeric
    """
    text = str(raw_value)
    if not SCORE_PATTERN.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def parse_rows(rows: Sequence[Sequence[Any]]) -> IngestionResult:
    """
    Convert raw gradesheet rows into Student records.

    Row 0 is the header and is always skipped. Rows with fewer than 11 cells
    are skipped. Rows whose CampusID is shorter than 6 characters are skipped
    with a warning naming the 1-based row number. Score cells that are not
    numeric are read as 0.0 and recorded as cell warnings. Records keep the
    input row order.

    Args:
        rows: Sequence of rows, each a sequence of cells

    Returns:
        IngestionResult with the parsed students and any warnings
    """
    students: List[Student] = []
    row_warnings: List[str] = []
    cell_warnings: List[CellParseWarning] = []

    for i, row in enumerate(rows):
        if i == constants.HEADER_ROW_INDEX:
            continue
        if len(row) < constants.MIN_ROW_CELLS:
            logger.debug(f"Skipping row {i + 1}: only {len(row)} cells")
            continue

        emp_id = str(row[constants.EMP_ID_COLUMN])
        campus_id = str(row[constants.CAMPUS_ID_COLUMN])

        if len(campus_id) < constants.CAMPUS_ID_MIN_LENGTH:
            warning = f"Warning: Skipping row {i + 1} due to invalid CampusID format ({campus_id})"
            logger.warning(warning)
            row_warnings.append(warning)
            continue

        start, end = constants.BRANCH_SLICE
        marks = {}
        for column, component in SCORE_COLUMNS:
            value = parse_score(row[column])
            if value is None:
                logger.debug(f"Row {i + 1}: non-numeric {component} value {row[column]!r} read as 0")
                cell_warnings.append(CellParseWarning(
                    row_number=i + 1, column=component, raw_value=str(row[column])
                ))
                value = 0.0
            marks[component] = value

        students.append(Student(emp_id=emp_id, branch=campus_id[start:end], marks=marks))

    return IngestionResult(
        students=students,
        row_warnings=row_warnings,
        cell_warnings=cell_warnings,
        rows_read=len(rows),
    )


def load_gradesheet(file_path: Union[str, Path]) -> IngestionResult:
    """Read and parse a gradesheet file in one step."""
    result = parse_rows(read_gradesheet_rows(file_path))
    logger.info(
        f"Parsed {len(result.students)} student records "
        f"({len(result.row_warnings)} rows skipped with warnings)"
    )
    return result
