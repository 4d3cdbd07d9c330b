"""
Step 5 Report module for the Gradesheet Analyzer.
Console rendering and the JSON export.
"""

from .report_logic import render_console_lines, build_export_payload, export_report

__all__ = [
    'render_console_lines',
    'build_export_payload',
    'export_report'
]
