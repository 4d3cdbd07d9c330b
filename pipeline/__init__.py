"""
Gradesheet processing pipeline.
Stages run in order: ingest, validation, statistics, rankings, report.
"""
