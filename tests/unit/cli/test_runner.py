"""Tests for flagdash_bootstrap.cli.runner."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from flagdash_bootstrap.cli import main
from flagdash_bootstrap.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from flagdash_bootstrap.cli.runner import CLIRunner, get_version
from flagdash_bootstrap.core.errors import HttpError


@pytest.fixture(autouse=True)
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestCLIRunner:
    """Tests for argument handling and exit codes."""

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert CLIRunner().run(["--version"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == get_version()

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert CLIRunner().run([]) == EXIT_SUCCESS
        assert "usage: flagdash-bootstrap" in capsys.readouterr().out

    def test_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert CLIRunner().run(["install", "--help"]) == EXIT_SUCCESS
        assert "--install-dir" in capsys.readouterr().out

    def test_unknown_option(self) -> None:
        assert CLIRunner().run(["install", "--bogus"]) == EXIT_INVALID_USAGE

    def test_unknown_command(self) -> None:
        assert CLIRunner().run(["uninstall"]) == EXIT_INVALID_USAGE

    def test_bad_config_file(self, project_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (project_dir / "flagdash-bootstrap.yml").write_text("repo: not-a-repo\n")
        assert CLIRunner().run(["resolve"]) == EXIT_INVALID_USAGE
        assert "Error: 'repo' must look like" in capsys.readouterr().err

    def test_missing_explicit_config(self, project_dir: Path) -> None:
        assert CLIRunner().run(["--config", str(project_dir / "x.yml"), "resolve"]) == EXIT_INVALID_USAGE

    def test_bootstrap_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        error = HttpError("https://github.com/x", 404)
        with patch("flagdash_bootstrap.cli.commands.resolve.ResolveCommand.execute", side_effect=error):
            assert CLIRunner().run(["resolve"]) == EXIT_BOOTSTRAP_FAILURE
        assert "Error: HTTP 404 for https://github.com/x" in capsys.readouterr().err

    def test_keyboard_interrupt(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch(
            "flagdash_bootstrap.cli.commands.resolve.ResolveCommand.execute",
            side_effect=KeyboardInterrupt,
        ):
            assert CLIRunner().run(["resolve"]) == EXIT_INTERRUPTED
        assert "Interrupted." in capsys.readouterr().err

    def test_cli_flags_reach_config(self) -> None:
        with patch(
            "flagdash_bootstrap.cli.commands.resolve.ResolveCommand.execute", return_value=0
        ) as mock_execute:
            CLIRunner().run(["resolve", "--tag", "cli-v1.0.0", "--repo", "acme/fd"])

        config = mock_execute.call_args.args[1]
        assert config.version == "cli-v1.0.0"
        assert config.repo == "acme/fd"
        assert config.get_sources() == ["cli"]


def test_main_delegates_to_runner() -> None:
    assert main(["--version"]) == EXIT_SUCCESS
