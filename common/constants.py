"""
Constants and configuration settings for the Gradesheet Analyzer.
Contains the fixed gradesheet layout, stage names, and pipeline defaults.
"""

from typing import Dict, List

# Pipeline stage constants
INGEST_STAGE = "step_1_ingest"
VALIDATION_STAGE = "step_2_validation"
STATS_STAGE = "step_3_stats"
RANKING_STAGE = "step_4_ranking"
REPORT_STAGE = "step_5_report"

# Human-readable stage names for log summaries
STAGE_DISPLAY_NAMES = {
    INGEST_STAGE: "Gradesheet Ingestion",
    VALIDATION_STAGE: "Consistency Validation",
    STATS_STAGE: "Statistics",
    RANKING_STAGE: "Rankings",
    REPORT_STAGE: "Report",
}

# Graded components, in sheet column order
QUIZ = "Quiz"
MID_SEM = "Mid-Sem"
LAB_TEST = "Lab Test"
WEEKLY_LABS = "Weekly Labs"
PRE_COMPRE = "Pre-Compre"
COMPRE = "Compre"
FINAL_TOTAL = "Final Total"

COMPONENTS: List[str] = [QUIZ, MID_SEM, LAB_TEST, WEEKLY_LABS, PRE_COMPRE, COMPRE]

# Components summed into Pre-Compre (E+F+G+H == I)
PRE_COMPRE_PARTS: List[str] = [QUIZ, MID_SEM, LAB_TEST, WEEKLY_LABS]

# Components summed into the ranking total (Pre-Compre replaced by Compre)
TOTAL_PARTS: List[str] = [QUIZ, MID_SEM, LAB_TEST, WEEKLY_LABS, COMPRE]

# Gradesheet column layout (0-indexed)
EMP_ID_COLUMN = 2
CAMPUS_ID_COLUMN = 3
COMPONENT_START_COLUMN = 4
FINAL_TOTAL_COLUMN = 10
MIN_ROW_CELLS = 11
HEADER_ROW_INDEX = 0

# Branch code is CampusID[4:6]
CAMPUS_ID_MIN_LENGTH = 6
BRANCH_SLICE = (4, 6)

# Column letters used in mismatch messages
COLUMN_LETTERS: Dict[str, str] = {
    QUIZ: "E",
    MID_SEM: "F",
    LAB_TEST: "G",
    WEEKLY_LABS: "H",
    PRE_COMPRE: "I",
    COMPRE: "J",
    FINAL_TOTAL: "K",
}

# Rankings
TOP_N = 3

# Input formats
EXCEL_EXTENSIONS = [".xlsx", ".xlsm"]
CSV_EXTENSIONS = [".csv"]
SUPPORTED_EXTENSIONS = EXCEL_EXTENSIONS + CSV_EXTENSIONS

# Export
DEFAULT_EXPORT_FILENAME = "output.json"
EXPORT_INDENT = 2

# Pipeline defaults
PIPELINE_CONFIG = {
    "export_json": False,
    "output_path": DEFAULT_EXPORT_FILENAME,
    "tolerance": 0.0,       # 0.0 means exact equality
    "max_workers": None,    # Let the executor decide
    "top_n": TOP_N,
    "log_level": "WARNING",
}

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_stage_display_name(stage: str) -> str:
    """
    Get the human-readable display name for a stage.

    Args:
        stage: Stage name (e.g., 'step_1_ingest')

    Returns:
        Human-readable display name
    """
    return STAGE_DISPLAY_NAMES.get(stage, stage)