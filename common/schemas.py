"""
Pydantic data models for the Gradesheet Analyzer.
Defines the student record, stage results, pipeline configuration, and the
final pipeline result.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import LOG_LEVELS, PIPELINE_CONFIG, TOTAL_PARTS


class Student(BaseModel):
    """One gradesheet row. Exported with the sheet-style keys EmpID/Branch/Marks/Total."""
    model_config = ConfigDict(populate_by_name=True)

    emp_id: str = Field(..., alias="EmpID")
    branch: str = Field(..., alias="Branch")
    marks: Dict[str, float] = Field(default_factory=dict, alias="Marks")
    total: Optional[float] = Field(None, alias="Total")

    def mark(self, component: str) -> float:
        """Score for a component, 0.0 when the record has no entry for it."""
        return self.marks.get(component, 0.0)

    def compute_total(self) -> float:
        """
        Recompute and store the ranking total from the marks.

        The total is Quiz + Mid-Sem + Lab Test + Weekly Labs + Compre. It only
        depends on the marks, so calling this repeatedly is idempotent.
        """
        self.total = sum(self.mark(component) for component in TOTAL_PARTS)
        return self.total


class CellParseWarning(BaseModel):
    """A score cell that failed numeric parsing and was read as zero."""
    row_number: int = Field(..., description="1-based sheet row number")
    column: str
    raw_value: str


class IngestionResult(BaseModel):
    """Output of the ingestion stage."""
    students: List[Student] = []
    row_warnings: List[str] = []
    cell_warnings: List[CellParseWarning] = []
    rows_read: int = 0

    @property
    def rows_skipped(self) -> int:
        # Header row is never counted as skipped
        return max(self.rows_read - 1 - len(self.students), 0)


class RankingEntry(BaseModel):
    """A single position in a top-N ranking."""
    position: int = Field(..., ge=1)
    emp_id: str
    branch: str
    total: float


class PipelineConfig(BaseModel):
    """Run configuration, built once at startup and passed into the pipeline."""
    input_path: str
    export_json: bool = PIPELINE_CONFIG["export_json"]
    class_filter: Optional[str] = None  # Accepted but not applied
    output_path: str = PIPELINE_CONFIG["output_path"]
    tolerance: float = Field(PIPELINE_CONFIG["tolerance"], ge=0.0)
    max_workers: Optional[int] = Field(PIPELINE_CONFIG["max_workers"], ge=1)
    top_n: int = Field(PIPELINE_CONFIG["top_n"], ge=1)
    log_level: str = PIPELINE_CONFIG["log_level"]

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f'log_level must be one of {LOG_LEVELS}')
        return v


class PipelineResult(BaseModel):
    """Everything a pipeline run produced."""
    run_id: str
    students: List[Student] = []
    row_warnings: List[str] = []
    cell_warnings: List[CellParseWarning] = []
    mismatches: List[str] = []
    component_averages: Optional[Dict[str, float]] = None  # None when there is no data
    branch_averages: Optional[Dict[str, float]] = None
    overall_top: List[RankingEntry] = []
    branch_top: Dict[str, List[RankingEntry]] = {}
    console_lines: List[str] = []
    export_path: Optional[str] = None
    export_error: Optional[str] = None
