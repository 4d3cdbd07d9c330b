#!/usr/bin/env python3
"""
Command-line runner for the Gradesheet Analyzer.

Validates a gradesheet, prints averages and top-3 rankings, and optionally
exports the records and mismatches as JSON.

Usage:
    gradesheet-analyzer path/to/gradesheet.xlsx [options]

    Or as a module:
    python -m scripts.run_gradesheet_cli path/to/gradesheet.xlsx [options]

Examples:
    # Console report only
    gradesheet-analyzer grades.xlsx

    # Also write output.json
    gradesheet-analyzer grades.xlsx --export

    # Export elsewhere, allow rounding noise in the consistency checks
    gradesheet-analyzer grades.csv --export --output reports/cs101.json --tolerance 0.005
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from common import constants, logger
from common.errors import IngestionError, ValidationCancelled
from common.schemas import PipelineConfig
from pipeline.orchestrator import run_gradesheet_pipeline


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gradesheet-analyzer",
        description="Validate a gradesheet and report averages and rankings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:" + __doc__.split('Examples:')[1] if 'Examples:' in __doc__ else ""
    )

    parser.add_argument(
        'input_path',
        nargs='?',
        help='Path to the gradesheet (.xlsx, .xlsm or .csv)'
    )

    parser.add_argument(
        '--export',
        action='store_true',
        dest='export_json',
        help='Export report as JSON'
    )

    parser.add_argument(
        '--class',
        dest='class_filter',
        default=None,
        help='Filter by Class ID (accepted, not applied yet)'
    )

    parser.add_argument(
        '--output',
        dest='output_path',
        default=constants.DEFAULT_EXPORT_FILENAME,
        help=f'Export file path (default: {constants.DEFAULT_EXPORT_FILENAME})'
    )

    parser.add_argument(
        '--tolerance',
        type=float,
        default=constants.PIPELINE_CONFIG['tolerance'],
        help='Allowed difference in consistency checks (default: 0, exact equality)'
    )

    parser.add_argument(
        '--workers',
        dest='max_workers',
        type=int,
        default=constants.PIPELINE_CONFIG['max_workers'],
        help='Number of validation worker threads'
    )

    parser.add_argument(
        '--log-level',
        default=constants.PIPELINE_CONFIG['log_level'],
        choices=constants.LOG_LEVELS,
        type=str.upper,
        help='Log level for the JSON logs written to stderr (default: WARNING)'
    )

    return parser


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Build the run configuration from parsed arguments."""
    return PipelineConfig(
        input_path=args.input_path,
        export_json=args.export_json,
        class_filter=args.class_filter,
        output_path=args.output_path,
        tolerance=args.tolerance,
        max_workers=args.max_workers,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI execution function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input_path:
        print("Usage: gradesheet-analyzer <path-to-gradesheet> [--export] [--class CLASS_ID]")
        return 0

    try:
        config = build_config(args)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}")
        return 1

    logger.setup_root_logger(getattr(logging, config.log_level))

    try:
        run_gradesheet_pipeline(config, echo=print)
    except IngestionError as e:
        print(f"Error: {e.message}")
        return 1
    except ValidationCancelled as e:
        print(f"Error: {e.message}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130  # Standard exit code for SIGINT

    return 0


if __name__ == "__main__":
    sys.exit(main())
