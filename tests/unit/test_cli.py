"""
Tests for the command-line runner.
"""

import json

import pytest

from scripts.run_gradesheet_cli import build_config, build_parser, main


class TestArguments:

    def test_defaults(self):
        args = build_parser().parse_args(["grades.xlsx"])
        config = build_config(args)

        assert config.input_path == "grades.xlsx"
        assert config.export_json is False
        assert config.class_filter is None
        assert config.output_path == "output.json"
        assert config.tolerance == 0.0
        assert config.log_level == "WARNING"

    def test_flags(self):
        args = build_parser().parse_args([
            "grades.csv", "--export", "--class", "CS101", "--output", "out/report.json",
            "--tolerance", "0.01", "--workers", "4", "--log-level", "debug",
        ])
        config = build_config(args)

        assert config.export_json is True
        assert config.class_filter == "CS101"
        assert config.output_path == "out/report.json"
        assert config.tolerance == 0.01
        assert config.max_workers == 4
        assert config.log_level == "DEBUG"


class TestMain:

    def test_no_path_prints_usage_and_succeeds(self, capsys):
        assert main([]) == 0

        assert capsys.readouterr().out.startswith("Usage: gradesheet-analyzer")

    def test_report_printed(self, capsys, fixture_generator, scenario_rows):
        path = fixture_generator.write_csv(scenario_rows[1:])

        assert main([str(path)]) == 0

        out = capsys.readouterr().out.splitlines()
        assert "Validation Errors:" in out
        assert "Mismatch in E+F+G+H != I for EmpID B" in out
        assert "Overall Top 3 Students:" in out
        assert not any(line.startswith("Data exported") for line in out)

    def test_export_flag_writes_file(self, capsys, fixture_generator, scenario_rows, tmp_path):
        path = fixture_generator.write_xlsx(scenario_rows[1:])
        output = tmp_path / "report.json"

        assert main([str(path), "--export", "--output", str(output)]) == 0

        assert f"Data exported to {output}" in capsys.readouterr().out
        assert [s["EmpID"] for s in json.loads(output.read_text())["students"]] == ["A", "B"]

    def test_export_failure_still_exits_cleanly(self, capsys, fixture_generator, scenario_rows, tmp_path):
        path = fixture_generator.write_csv(scenario_rows[1:])
        output = tmp_path / "missing_dir" / "report.json"

        assert main([str(path), "--export", "--output", str(output)]) == 0

        out = capsys.readouterr().out
        assert "Branch-wise Averages:" in out
        assert "Error creating JSON file:" in out

    def test_missing_file_exits_with_error(self, capsys, tmp_path):
        assert main([str(tmp_path / "missing.xlsx")]) == 1

        assert capsys.readouterr().out.startswith("Error:")

    def test_negative_tolerance_rejected(self, capsys):
        assert main(["grades.xlsx", "--tolerance", "-1"]) == 1

        assert "invalid configuration" in capsys.readouterr().out

    def test_unknown_log_level_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            main(["grades.xlsx", "--log-level", "chatty"])
