"""
General utility functions for the Gradesheet Analyzer.
"""

import uuid
from datetime import datetime, timezone


def generate_run_id() -> str:
    """
    Generate a unique run ID combining ISO 8601 timestamp (UTC) and short UUID.

    Format: YYYY-MM-DDTHHMMSSZ_shortUUID
    Example: 2025-06-07T103045Z_a1b2c3d4

    Returns:
        Unique run identifier string
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H%M%SZ")

    # Short UUID (first 8 characters)
    short_uuid = uuid.uuid4().hex[:8]

    return f"{timestamp}_{short_uuid}"


def format_score(value: float) -> str:
    """Format a score or average with two decimals, as every report line does."""
    return f"{value:.2f}"
