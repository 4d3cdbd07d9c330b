"""
Storage utilities for the Gradesheet Analyzer.
Provides atomic JSON writes for the one-shot export artifact.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from .constants import EXPORT_INDENT
from .logger import json_serializer


def write_json_atomic(path: Union[str, Path], data: Any, indent: Optional[int] = EXPORT_INDENT) -> Path:
    """
    Write JSON data to a file atomically.

    The document is written to a temporary file in the target directory and
    then moved over the destination, so a failed write never leaves a
    truncated file behind.

    Args:
        path: Destination file path
        data: Data to write as JSON
        indent: Indentation for pretty-printing (default: 2)

    Returns:
        The resolved destination path

    Raises:
        IOError: If the file cannot be created or written
    """
    target = Path(path)
    directory = target.parent

    if not directory.is_dir():
        raise IOError(f"Output directory does not exist: {directory}")

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="utf-8", dir=directory,
            prefix=f".{target.name}.", suffix=".tmp", delete=False
        ) as tmp_file:
            tmp_name = tmp_file.name
            json.dump(data, tmp_file, indent=indent, default=json_serializer, allow_nan=False)
            tmp_file.write("\n")

        os.replace(tmp_name, target)
        tmp_name = None
    except (OSError, TypeError, ValueError) as e:
        raise IOError(f"Failed to write {target}: {str(e)}") from e
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    return target.resolve()
