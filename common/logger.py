"""
Logging utilities for the Gradesheet Analyzer.
Provides run-scoped logging with JSON-line output on stderr, so the report
printed on stdout stays free of log noise.
Includes both human-readable stage summaries and machine-parseable events.
"""

import logging
import sys
import json
from typing import Optional, Dict, Any, List, Union
from datetime import datetime
import numpy as np

from .constants import get_stage_display_name

LOGGER_ROOT = "gradesheet_analyzer"


def json_serializer(obj):
    """
    Custom JSON serializer that handles numpy types and other non-serializable objects.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable version of the object
    """
    if isinstance(obj, (np.integer, np.floating)):
        return obj.item()  # Convert numpy types to Python types
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif hasattr(obj, 'model_dump'):  # pydantic models
        return obj.model_dump(by_alias=True)
    elif hasattr(obj, 'isoformat'):  # datetime objects
        return obj.isoformat()
    else:
        # Fallback: convert to string
        return str(obj)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    Produces one JSON object per line.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as a JSON line.

        Args:
            record: The log record to format

        Returns:
            JSON string representation of the log record
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Logger names follow pattern: gradesheet_analyzer.{logger_type}.{stage}.{run_id}
        name_parts = record.name.split('.')
        if len(name_parts) >= 3 and name_parts[0] == LOGGER_ROOT:
            log_entry["run_id"] = name_parts[-1]
            if len(name_parts) >= 4:
                log_entry["stage"] = name_parts[-2]

        # Add any extra JSON data from the log record
        if hasattr(record, 'extra_json') and isinstance(record.extra_json, dict):
            log_entry.update(record.extra_json)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
            log_entry["severity"] = "ERROR"

        return json.dumps(log_entry, ensure_ascii=False, separators=(',', ':'), default=json_serializer)


def get_logger(run_id: str, logger_name: str = 'pipeline', log_level: str = 'INFO',
               stage: Optional[str] = None) -> logging.Logger:
    """
    Get a run-scoped logger that writes JSON lines to stderr.

    Args:
        run_id: Unique run identifier
        logger_name: Name for the logger (default: 'pipeline')
        log_level: Logging level as string (default: 'INFO')
        stage: Pipeline stage name for stage-specific logging (optional)

    Returns:
        Configured logger instance
    """
    if stage:
        full_logger_name = f"{LOGGER_ROOT}.{logger_name}.{stage}.{run_id}"
    else:
        full_logger_name = f"{LOGGER_ROOT}.{logger_name}.{run_id}"

    logger = logging.getLogger(full_logger_name)

    # Don't add handlers if logger already exists and has handlers
    if logger.handlers:
        return logger

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(JSONFormatter())

    logger.addHandler(console_handler)

    # Prevent propagation to root logger to avoid duplicate messages
    logger.propagate = False

    return logger


def get_structured_logger(run_id: str, logger_name: str = 'structured', log_level: str = 'INFO',
                          stage: Optional[str] = None) -> logging.Logger:
    """
    Get a run-scoped logger for machine-readable events.

    Args:
        run_id: Unique run identifier
        logger_name: Name for the logger (default: 'structured')
        log_level: Logging level as string (default: 'INFO')
        stage: Pipeline stage name (optional)

    Returns:
        Configured logger instance that outputs JSON lines
    """
    return get_logger(run_id, logger_name, log_level, stage=stage)


def setup_root_logger(level: int = logging.WARNING) -> None:
    """
    Configure the root logger used by the stage modules' module-level loggers.

    Args:
        level: Logging level for root logger (default: WARNING)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
        root_logger.addHandler(handler)

    # Suppress specific noisy loggers
    noisy_loggers = [
        'openpyxl',
        'numexpr',
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def release_run_loggers(run_id: str) -> None:
    """
    Close the handlers of every logger scoped to a run and drop the loggers.

    Args:
        run_id: Unique run identifier
    """
    suffix = f".{run_id}"
    registry = logging.Logger.manager.loggerDict
    for name in list(registry):
        if not (name.startswith(f"{LOGGER_ROOT}.") and name.endswith(suffix)):
            continue
        run_logger = registry.pop(name)
        if isinstance(run_logger, logging.Logger):
            for handler in list(run_logger.handlers):
                run_logger.removeHandler(handler)
                handler.close()


def log_stage_start(logger: logging.Logger, stage: str, run_id: str) -> None:
    """Log the start of a pipeline stage."""
    logger.info(f"Starting stage '{get_stage_display_name(stage)}' for run {run_id}")


def log_stage_end(logger: logging.Logger, stage: str, run_id: str,
                  duration_seconds: float) -> None:
    """Log the completion of a pipeline stage."""
    logger.info(f"Completed stage '{get_stage_display_name(stage)}' for run {run_id} in {duration_seconds:.2f}s")


# =============================
# STRUCTURED LOGGING HELPERS
# =============================

def log_structured_event(logger: logging.Logger, event_type: str,
                         event_data: Optional[Dict[str, Any]] = None,
                         message: str = "") -> None:
    """
    Log a structured event with a consistent schema.

    Args:
        logger: Structured logger instance
        event_type: Type of event (e.g., 'ingestion_complete')
        event_data: Additional event-specific data
        message: Human-readable message (optional)
    """
    extra_json = {
        "event": event_type,
        "event_data": event_data or {}
    }

    logger.info(message or f"Event: {event_type}", extra={"extra_json": extra_json})


def log_structured_metric(logger: logging.Logger, metric_name: str,
                          metric_value: Union[float, int, str],
                          metric_type: str = "statistics",
                          additional_data: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a structured metric.

    Args:
        logger: Structured logger instance
        metric_name: Name of the metric
        metric_value: Value of the metric
        metric_type: Type of metric (e.g., 'statistics', 'data_quality', 'timing')
        additional_data: Additional metric context
    """
    extra_json = {
        "metric_name": metric_name,
        "metric_value": metric_value,
        "metric_type": metric_type
    }

    if additional_data:
        extra_json.update(additional_data)

    logger.info(f"Metric: {metric_name} = {metric_value}", extra={"extra_json": extra_json})


def log_structured_error(logger: logging.Logger, error_type: str, error_message: str,
                         error_context: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a structured error event.

    Args:
        logger: Structured logger instance
        error_type: Type of error (e.g., 'ingestion_failed', 'export_failed')
        error_message: Error message
        error_context: Additional error context
    """
    extra_json = {
        "error_type": error_type,
        "error_context": error_context or {}
    }

    logger.error(error_message, extra={"extra_json": extra_json})


# =============================
# PIPELINE SUMMARY LOGGING
# =============================

class PipelineSummaryLogger:
    """
    High-level summary logger for one pipeline run.
    Emits a readable line per stage plus a matching structured event.
    """

    def __init__(self, run_id: str, log_level: str = 'INFO'):
        self.run_id = run_id
        self.logger = get_logger(run_id, "SUMMARY", log_level)
        self.structured_logger = get_structured_logger(run_id, "pipeline_events", log_level)
        self.start_time = datetime.now()

    def log_pipeline_start(self, input_path: str) -> None:
        """Log the start of the pipeline with input file information."""
        self.logger.info("=" * 60)
        self.logger.info("GRADESHEET ANALYZER STARTED")
        self.logger.info(f"Input File: {input_path}")
        self.logger.info(f"Run ID: {self.run_id}")

        log_structured_event(
            self.structured_logger,
            "pipeline_started",
            {
                "input_path": input_path,
                "started_at": self.start_time.isoformat()
            },
            f"Pipeline started with file: {input_path}"
        )

    def log_ingestion_summary(self, rows_read: int, students: int,
                              warnings: Optional[List[str]] = None,
                              cell_warning_count: int = 0) -> None:
        """Log a summary of the ingestion stage."""
        self.logger.info("GRADESHEET INGESTION COMPLETE")
        self.logger.info(f"   • Rows read: {rows_read:,} (including header)")
        self.logger.info(f"   • Student records: {students:,}")

        if warnings:
            self.logger.info(f"   • Rows skipped with warnings: {len(warnings)}")
            for warning in warnings[:3]:
                self.logger.info(f"     - {warning}")
            if len(warnings) > 3:
                self.logger.info(f"     ... and {len(warnings) - 3} more")
        if cell_warning_count:
            self.logger.info(f"   • Non-numeric score cells read as 0: {cell_warning_count}")

        log_structured_event(
            self.structured_logger,
            "ingestion_complete",
            {
                "rows_read": rows_read,
                "students": students,
                "warnings": warnings or [],
                "warning_count": len(warnings) if warnings else 0,
                "cell_warning_count": cell_warning_count
            },
            f"Ingestion complete: {students:,} student records"
        )

    def log_validation_summary(self, checked: int, mismatches: List[str],
                               workers: Optional[int] = None) -> None:
        """Log a summary of the validation stage."""
        self.logger.info("CONSISTENCY VALIDATION COMPLETE")
        self.logger.info(f"   • Records checked: {checked:,}")
        self.logger.info(f"   • Mismatches: {len(mismatches)}")

        log_structured_event(
            self.structured_logger,
            "validation_complete",
            {
                "records_checked": checked,
                "mismatch_count": len(mismatches),
                "max_workers": workers
            },
            f"Validation complete: {len(mismatches)} mismatches in {checked} records"
        )

    def log_statistics_summary(self, component_averages: Optional[Dict[str, float]],
                               branch_averages: Optional[Dict[str, float]]) -> None:
        """Log a summary of the statistics stage."""
        self.logger.info("STATISTICS COMPLETE")
        if component_averages is None:
            self.logger.info("   • No data to average")
        else:
            self.logger.info(f"   • Components averaged: {len(component_averages)}")
            self.logger.info(f"   • Branches: {len(branch_averages or {})}")

        log_structured_event(
            self.structured_logger,
            "statistics_complete",
            {
                "component_averages": component_averages or {},
                "branch_averages": branch_averages or {}
            },
            "Statistics complete"
        )

    def log_ranking_summary(self, overall_top: List[Any], branch_count: int) -> None:
        """Log a summary of the ranking stage."""
        self.logger.info("RANKINGS COMPLETE")
        for entry in overall_top:
            self.logger.info(f"   {entry.position}. {entry.emp_id} ({entry.total:.2f})")
        self.logger.info(f"   • Branch rankings: {branch_count}")

        log_structured_event(
            self.structured_logger,
            "ranking_complete",
            {
                "overall_top": overall_top,
                "branch_count": branch_count
            },
            f"Rankings complete for {branch_count} branches"
        )

    def log_export_summary(self, export_path: Optional[str], error_message: Optional[str] = None) -> None:
        """Log the outcome of the export."""
        if error_message:
            self.logger.info(f"EXPORT FAILED: {error_message}")
        else:
            self.logger.info(f"EXPORT COMPLETE: {export_path}")

        log_structured_event(
            self.structured_logger,
            "export_complete" if not error_message else "export_failed",
            {
                "export_path": export_path,
                "error_message": error_message
            },
            f"Export {'failed' if error_message else 'written to ' + str(export_path)}"
        )

    def log_pipeline_completion(self, success: bool = True, error_message: Optional[str] = None) -> None:
        """Log the completion of the pipeline."""
        end_time = datetime.now()
        duration = (end_time - self.start_time).total_seconds()

        if success:
            self.logger.info("PIPELINE COMPLETED SUCCESSFULLY")
            self.logger.info(f"Total Duration: {duration:.2f} seconds")
        else:
            self.logger.info("PIPELINE FAILED")
            self.logger.info(f"Duration before failure: {duration:.2f} seconds")
            if error_message:
                self.logger.info(f"Error: {error_message}")
        self.logger.info("=" * 60)

        event_type = "pipeline_completed" if success else "pipeline_failed"
        event_data = {
            "success": success,
            "duration_seconds": duration,
            "completed_at": end_time.isoformat(),
        }

        if error_message:
            event_data["error_message"] = error_message

        log_structured_event(
            self.structured_logger,
            event_type,
            event_data,
            f"Pipeline {'completed successfully' if success else 'failed'} in {duration:.2f}s"
        )

        release_run_loggers(self.run_id)


def get_pipeline_summary_logger(run_id: str, log_level: str = 'INFO') -> PipelineSummaryLogger:
    """
    Get a pipeline summary logger instance.

    Args:
        run_id: Unique run identifier
        log_level: Logging level as string

    Returns:
        PipelineSummaryLogger instance
    """
    return PipelineSummaryLogger(run_id, log_level)
