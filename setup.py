"""
Setup file for the Gradesheet Analyzer.
"""

from setuptools import setup, find_packages

setup(
    name="gradesheet-analyzer",
    version="0.1.0",
    packages=find_packages(include=["common", "pipeline", "pipeline.*", "scripts"]),
    install_requires=[
        "pandas",
        "numpy",
        "openpyxl",
        "pydantic>=2",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "gradesheet-analyzer=scripts.run_gradesheet_cli:main",
        ],
    },
    python_requires=">=3.8",
)
