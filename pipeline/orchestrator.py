"""
Pipeline orchestrator for the Gradesheet Analyzer.
Runs ingestion, the validation barrier, statistics, rankings and the report
in order for one gradesheet.
"""

import threading
import time
from typing import Callable, Optional

from common import constants, logger, utils
from common.errors import ExportError, IngestionError, NoDataError, ValidationCancelled
from common.schemas import PipelineConfig, PipelineResult
from pipeline.step_1_ingest.ingest_logic import load_gradesheet
from pipeline.step_2_validation.validation_logic import run_validation
from pipeline.step_3_stats.stats_logic import compute_branch_averages, compute_component_averages
from pipeline.step_4_ranking.ranking_logic import rank_by_branch, rank_overall
from pipeline.step_5_report.report_logic import export_report, render_console_lines


def run_gradesheet_pipeline(config: PipelineConfig,
                            echo: Optional[Callable[[str], None]] = None,
                            cancel_event: Optional[threading.Event] = None,
                            run_id: Optional[str] = None) -> PipelineResult:
    """
    Run every stage for the gradesheet named in the configuration.

    Validation runs first on worker threads and is joined before statistics
    and rankings touch the records. Console lines are emitted through echo
    before the export is attempted, so an export failure never affects them.

    Args:
        config: Run configuration
        echo: Called with each console line (default: lines are only returned)
        cancel_event: Optional cancellation signal for the validation workers
        run_id: Run identifier for log correlation (default: generated)

    Returns:
        PipelineResult with every stage's output

    Raises:
        IngestionError: If the gradesheet cannot be read
        ValidationCancelled: If cancel_event is set during validation
    """
    run_id = run_id or utils.generate_run_id()
    orchestrator_logger = logger.get_structured_logger(run_id, "pipeline_orchestrator", config.log_level)
    summary_logger = logger.get_pipeline_summary_logger(run_id, config.log_level)
    summary_logger.log_pipeline_start(config.input_path)

    if config.class_filter:
        orchestrator_logger.warning(
            f"Class filter '{config.class_filter}' is accepted but not applied to the records"
        )

    # Stage 1: Ingestion
    stage_start = time.time()
    logger.log_stage_start(orchestrator_logger, constants.INGEST_STAGE, run_id)
    try:
        ingestion = load_gradesheet(config.input_path)
    except IngestionError as e:
        logger.log_structured_error(
            orchestrator_logger,
            "ingestion_failed",
            e.message,
            e.to_detail()
        )
        summary_logger.log_pipeline_completion(success=False, error_message=e.message)
        raise
    logger.log_stage_end(orchestrator_logger, constants.INGEST_STAGE, run_id, time.time() - stage_start)
    summary_logger.log_ingestion_summary(
        rows_read=ingestion.rows_read,
        students=len(ingestion.students),
        warnings=ingestion.row_warnings,
        cell_warning_count=len(ingestion.cell_warnings)
    )
    students = ingestion.students
    logger.log_structured_metric(
        orchestrator_logger, "rows_skipped", ingestion.rows_skipped, "data_quality",
        {"cell_warning_count": len(ingestion.cell_warnings)}
    )

    # Stage 2: Validation (fan-out/fan-in barrier)
    stage_start = time.time()
    logger.log_stage_start(orchestrator_logger, constants.VALIDATION_STAGE, run_id)
    try:
        mismatches = run_validation(
            students,
            max_workers=config.max_workers,
            tolerance=config.tolerance,
            cancel_event=cancel_event
        )
    except ValidationCancelled as e:
        orchestrator_logger.warning(e.message)
        summary_logger.log_pipeline_completion(success=False, error_message=e.message)
        raise
    logger.log_stage_end(orchestrator_logger, constants.VALIDATION_STAGE, run_id, time.time() - stage_start)
    summary_logger.log_validation_summary(len(students), mismatches, config.max_workers)
    logger.log_structured_metric(orchestrator_logger, "mismatch_count", len(mismatches), "data_quality")

    # Stage 3: Statistics
    stage_start = time.time()
    logger.log_stage_start(orchestrator_logger, constants.STATS_STAGE, run_id)
    try:
        component_averages = compute_component_averages(students)
    except NoDataError as e:
        orchestrator_logger.warning(f"Component averages: {e.message}")
        component_averages = None
    try:
        branch_averages = compute_branch_averages(students)
    except NoDataError as e:
        orchestrator_logger.warning(f"Branch averages: {e.message}")
        branch_averages = None
    logger.log_stage_end(orchestrator_logger, constants.STATS_STAGE, run_id, time.time() - stage_start)
    summary_logger.log_statistics_summary(component_averages, branch_averages)

    # Stage 4: Rankings
    stage_start = time.time()
    logger.log_stage_start(orchestrator_logger, constants.RANKING_STAGE, run_id)
    overall_top = rank_overall(students, config.top_n)
    branch_top = rank_by_branch(students, config.top_n)
    logger.log_stage_end(orchestrator_logger, constants.RANKING_STAGE, run_id, time.time() - stage_start)
    summary_logger.log_ranking_summary(overall_top, len(branch_top))

    # Stage 5: Report
    logger.log_stage_start(orchestrator_logger, constants.REPORT_STAGE, run_id)
    console_lines = render_console_lines(
        mismatches,
        component_averages,
        branch_averages,
        overall_top,
        branch_top,
        row_warnings=ingestion.row_warnings,
        top_n=config.top_n
    )
    if echo is not None:
        for line in console_lines:
            echo(line)

    result = PipelineResult(
        run_id=run_id,
        students=students,
        row_warnings=ingestion.row_warnings,
        cell_warnings=ingestion.cell_warnings,
        mismatches=mismatches,
        component_averages=component_averages,
        branch_averages=branch_averages,
        overall_top=overall_top,
        branch_top=branch_top,
    )

    if config.export_json:
        try:
            written = export_report(students, mismatches, config.output_path)
            result.export_path = str(written)
            export_line = f"Data exported to {config.output_path}"
        except ExportError as e:
            logger.log_structured_error(
                orchestrator_logger,
                "export_failed",
                e.message,
                e.to_detail()
            )
            result.export_error = e.message
            export_line = e.message
        console_lines.append(export_line)
        if echo is not None:
            echo(export_line)
        summary_logger.log_export_summary(result.export_path, result.export_error)

    result.console_lines = console_lines
    summary_logger.log_pipeline_completion(success=True)
    return result
