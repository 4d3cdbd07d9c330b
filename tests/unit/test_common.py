"""
Tests for the shared modules: schemas, storage, errors and logging helpers.
"""

import json
import logging
import re

import numpy as np
import pytest
from pydantic import ValidationError

from common import logger, storage, utils
from common.errors import ErrorCodes, IngestionError, create_error_detail, raise_file_not_found
from common.schemas import PipelineConfig, Student


class TestSchemas:

    def test_student_accepts_sheet_keys(self):
        student = Student.model_validate({"EmpID": "E1", "Branch": "CS", "Marks": {"Quiz": 3.0}})

        assert student.emp_id == "E1"
        assert student.mark("Quiz") == 3.0
        assert student.mark("Compre") == 0.0
        assert student.total is None

    def test_config_defaults(self):
        config = PipelineConfig(input_path="grades.xlsx")

        assert config.export_json is False
        assert config.output_path == "output.json"
        assert config.max_workers is None
        assert config.top_n == 3

    @pytest.mark.parametrize("overrides", [
        {"tolerance": -0.5},
        {"max_workers": 0},
        {"top_n": 0},
        {"log_level": "LOUD"},
    ])
    def test_config_rejects_bad_values(self, overrides):
        with pytest.raises(ValidationError):
            PipelineConfig(input_path="grades.xlsx", **overrides)

    def test_config_log_level_is_normalized(self):
        assert PipelineConfig(input_path="x.csv", log_level="info").log_level == "INFO"


class TestStorage:

    def test_write_and_read_back(self, tmp_path):
        path = tmp_path / "data.json"

        storage.write_json_atomic(path, {"values": [np.float64(1.5), np.int64(2)]})

        assert json.loads(path.read_text()) == {"values": [1.5, 2]}
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_missing_directory_raises_ioerror(self, tmp_path):
        with pytest.raises(IOError):
            storage.write_json_atomic(tmp_path / "nope" / "data.json", {})

    def test_non_finite_values_are_refused(self, tmp_path):
        path = tmp_path / "data.json"

        with pytest.raises(IOError):
            storage.write_json_atomic(path, {"total": float("nan")})

        assert list(tmp_path.iterdir()) == []


class TestErrors:

    def test_error_detail_shape(self):
        assert create_error_detail("boom", ErrorCodes.INTERNAL_ERROR) == {
            "detail": "boom",
            "code": "internal_error",
        }

    def test_raise_helpers_set_code_and_context(self):
        with pytest.raises(IngestionError) as exc_info:
            raise_file_not_found("grades.xlsx")

        detail = exc_info.value.to_detail()
        assert detail["code"] == ErrorCodes.FILE_NOT_FOUND
        assert detail["context"] == {"path": "grades.xlsx"}


class TestLogging:

    def test_json_serializer_handles_models(self):
        student = Student(emp_id="E1", branch="CS")

        assert logger.json_serializer(student)["EmpID"] == "E1"
        assert logger.json_serializer(np.float32(0.5)) == 0.5

    def test_formatter_adds_run_id_and_extra_json(self):
        record = logging.LogRecord(
            f"{logger.LOGGER_ROOT}.pipeline.validation.run123", logging.INFO,
            __file__, 1, "checked", None, None
        )
        record.extra_json = {"event": "validation_complete"}

        entry = json.loads(logger.JSONFormatter().format(record))

        assert entry["run_id"] == "run123"
        assert entry["stage"] == "validation"
        assert entry["event"] == "validation_complete"
        assert entry["severity"] == "INFO"

    def test_run_loggers_do_not_propagate(self):
        run_logger = logger.get_structured_logger(utils.generate_run_id(), "test", "DEBUG")

        assert run_logger.propagate is False
        assert run_logger.level == logging.DEBUG

    def test_release_run_loggers_closes_handlers(self):
        run_id = utils.generate_run_id()
        run_logger = logger.get_logger(run_id, "test", "INFO", stage="validation")
        other_run_id = utils.generate_run_id()
        other = logger.get_logger(other_run_id, "test")

        logger.release_run_loggers(run_id)

        assert run_logger.handlers == []
        assert not any(name.endswith(run_id) for name in logging.Logger.manager.loggerDict)
        assert other.handlers
        logger.release_run_loggers(other_run_id)


class TestUtils:

    def test_run_id_format(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{6}Z_[0-9a-f]{8}", utils.generate_run_id())

    @pytest.mark.parametrize("value, expected", [(70, "70.00"), (29.5, "29.50"), (1 / 3, "0.33")])
    def test_format_score(self, value, expected):
        assert utils.format_score(value) == expected
