"""
Shared error codes and exception types for the Gradesheet Analyzer.
Provides consistent error details across pipeline stages and the CLI.
"""

from typing import Dict, Any, Optional


# Error codes for consistent error reporting
class ErrorCodes:
    """Standard error codes used across the pipeline."""

    # General errors
    INTERNAL_ERROR = "internal_error"

    # Ingestion errors
    FILE_NOT_FOUND = "file_not_found"
    UNSUPPORTED_FILE_TYPE = "unsupported_file_type"
    FILE_PARSE_ERROR = "file_parse_error"

    # Statistics errors
    NO_DATA = "no_data"

    # Validation errors
    VALIDATION_CANCELLED = "validation_cancelled"

    # Export errors
    EXPORT_FAILED = "export_failed"


def create_error_detail(
    message: str,
    code: str,
    context: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Create a standardized error detail dictionary.

    Args:
        message: Human-readable error message
        code: Machine-readable error code
        context: Optional additional context information

    Returns:
        Standardized error detail dictionary
    """
    detail = {
        "detail": message,
        "code": code
    }

    if context:
        detail["context"] = context

    return detail


class GradesheetError(Exception):
    """Base class for all pipeline errors."""

    code = ErrorCodes.INTERNAL_ERROR

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_detail(self) -> Dict[str, Any]:
        """Return the standardized error detail for this exception."""
        return create_error_detail(self.message, self.code, self.context)


class IngestionError(GradesheetError):
    """The gradesheet could not be opened or read. Fatal to the run."""

    code = ErrorCodes.FILE_PARSE_ERROR


class NoDataError(GradesheetError):
    """An average was requested over an empty record list."""

    code = ErrorCodes.NO_DATA

    def __init__(self, message: str = "no data to average",
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class ValidationCancelled(GradesheetError):
    """The validation pass was cancelled before every record was checked."""

    code = ErrorCodes.VALIDATION_CANCELLED


class ExportError(GradesheetError):
    """The export artifact could not be created or written."""

    code = ErrorCodes.EXPORT_FAILED


def raise_file_not_found(path: str) -> None:
    """Raise a standardized ingestion error for a missing input file."""
    error = IngestionError(f"Input file not found: {path}", context={"path": path})
    error.code = ErrorCodes.FILE_NOT_FOUND
    raise error


def raise_unsupported_file_type(path: str, suffix: str) -> None:
    """Raise a standardized ingestion error for an unsupported extension."""
    error = IngestionError(
        f"Unsupported file type '{suffix}' for {path}",
        context={"path": path, "suffix": suffix}
    )
    error.code = ErrorCodes.UNSUPPORTED_FILE_TYPE
    raise error
