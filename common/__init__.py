"""
Shared modules for the Gradesheet Analyzer: constants, schemas, errors,
logging and storage helpers.
"""
