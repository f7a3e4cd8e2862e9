"""
Tests for the galaxy version commands and the argument parser.
"""

import subprocess
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from hubactions.cli.main import build_parser, main
from hubactions.cli.version import version_check_command, version_increment_command
from hubactions.core.errors import ExitCode


class TestVersionCommands:
    def test_increment_writes_outputs(self, tmp_path, monkeypatch):
        galaxy = tmp_path / "galaxy.yml"
        galaxy.write_text("version: 1.0.0\n")
        output_file = tmp_path / "out"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))

        exit_code = version_increment_command(
            str(galaxy), "UTC", now=datetime(2026, 3, 9, 8, 5, tzinfo=timezone.utc)
        )

        assert exit_code == ExitCode.SUCCESS
        assert output_file.read_text() == "version=2026.309.805\nprevious-version=1.0.0\n"

    def test_increment_missing_file(self, tmp_path):
        assert version_increment_command(str(tmp_path / "galaxy.yml"), "UTC") == ExitCode.VALIDATION_ERROR

    def test_check_not_bumped(self, tmp_path):
        galaxy = tmp_path / "galaxy.yml"
        galaxy.write_text("version: 1.0.0\n")
        completed = subprocess.CompletedProcess([], 0, stdout="version: 1.0.0\n", stderr="")

        with patch("hubactions.galaxy.version.subprocess.run", return_value=completed):
            assert version_check_command(str(galaxy)) == ExitCode.VALIDATION_ERROR

    def test_check_bumped(self, tmp_path):
        galaxy = tmp_path / "galaxy.yml"
        galaxy.write_text("version: 1.1.0\n")
        completed = subprocess.CompletedProcess([], 0, stdout="version: 1.0.0\n", stderr="")

        with patch("hubactions.galaxy.version.subprocess.run", return_value=completed):
            assert version_check_command(str(galaxy)) == ExitCode.SUCCESS


class TestParser:
    def test_project_sync_flags(self):
        args = build_parser().parse_args(
            ["project-sync", "--host", "h", "--token", "t", "--project-name", "p", "--parallel"]
        )

        assert args.command == "project-sync"
        assert args.project_name == "p"
        assert args.parallel is True
        assert args.retry_attempts is None

    def test_parallel_defaults_to_unset(self):
        args = build_parser().parse_args(["project-sync"])
        assert args.parallel is None

    @patch("hubactions.cli.main.configure_logging")
    def test_main_dispatches_and_exits(self, _configure_logging):
        with patch("hubactions.cli.project_sync.project_sync_command", return_value=0) as command:
            with pytest.raises(SystemExit) as exc_info:
                main(["project-sync", "--retry-attempts", "4"])

        assert exc_info.value.code == 0
        assert command.call_args.kwargs["retry_attempts"] == 4

    @patch("hubactions.cli.main.configure_logging")
    def test_no_command_prints_help(self, _configure_logging):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_log_level_defaults_to_info(self):
        assert build_parser().parse_args(["version-check"]).log_level == "INFO"

    @patch("hubactions.cli.main.configure_logging")
    def test_main_configures_requested_level(self, configure_logging):
        with patch("hubactions.cli.version.version_check_command", return_value=0):
            with pytest.raises(SystemExit):
                main(["--log-level", "DEBUG", "version-check"])

        configure_logging.assert_called_once_with("DEBUG")
