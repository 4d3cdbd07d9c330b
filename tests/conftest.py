"""
Shared pytest fixtures for the Gradesheet Analyzer tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from common.schemas import Student
from tests.fixtures.fixture_generator import GradesheetFixtureGenerator, HEADER, make_row


def make_student(emp_id, branch="AB", quiz=10.0, mid_sem=10.0, lab_test=10.0,
                 weekly_labs=10.0, pre_compre=40.0, compre=30.0, final_total=70.0):
    return Student(
        emp_id=emp_id,
        branch=branch,
        marks={
            "Quiz": quiz,
            "Mid-Sem": mid_sem,
            "Lab Test": lab_test,
            "Weekly Labs": weekly_labs,
            "Pre-Compre": pre_compre,
            "Compre": compre,
            "Final Total": final_total,
        },
    )


@pytest.fixture
def student_factory():
    """Build Student records; defaults describe a consistent record with total 70."""
    return make_student


@pytest.fixture
def fixture_generator(tmp_path):
    """Gradesheet file writer rooted in a per-test temporary directory."""
    return GradesheetFixtureGenerator(tmp_path / "fixtures")


@pytest.fixture
def scenario_rows():
    """Header plus two valid rows; row B declares Pre-Compre 41 instead of 40."""
    return [
        HEADER,
        make_row("A", "2019XXAB01", serial="1"),
        make_row("B", "2019XXAB02", pre_compre=41, serial="2"),
    ]
