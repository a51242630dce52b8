"""Tests for flagdash_bootstrap.cli.commands.status."""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path
from unittest.mock import patch

import pytest

from flagdash_bootstrap.cli.commands.status import StatusCommand
from flagdash_bootstrap.cli.exit_codes import EXIT_NOT_INSTALLED, EXIT_SUCCESS
from flagdash_bootstrap.config.models import BootstrapConfig


def _args(**kwargs) -> Namespace:
    return Namespace(**{"check_version": False, "json": False, **kwargs})


class TestStatusCommand:
    def test_not_installed(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = StatusCommand().execute(_args(), BootstrapConfig(install_dir=tmp_path))
        assert exit_code == EXIT_NOT_INSTALLED
        assert f"flagdash: not installed (expected at {tmp_path / 'flagdash'})" in capsys.readouterr().out

    def test_installed(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        binary = tmp_path / "flagdash"
        binary.write_text("#!/bin/sh\n")
        binary.chmod(0o755)

        exit_code = StatusCommand().execute(_args(), BootstrapConfig(install_dir=tmp_path))

        assert exit_code == EXIT_SUCCESS
        assert f"installed at {binary}" in capsys.readouterr().out

    def test_installed_with_version(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        binary = tmp_path / "flagdash"
        binary.write_text("#!/bin/sh\n")
        binary.chmod(0o755)

        with patch(
            "flagdash_bootstrap.bootstrap.validation.run_version_check", return_value="flagdash 0.2.0"
        ):
            StatusCommand().execute(_args(check_version=True), BootstrapConfig(install_dir=tmp_path))

        assert "(flagdash 0.2.0)" in capsys.readouterr().out

    def test_not_executable(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "flagdash").write_text("data")
        with patch("flagdash_bootstrap.bootstrap.validation.os.access", return_value=False):
            exit_code = StatusCommand().execute(_args(), BootstrapConfig(install_dir=tmp_path))
        assert exit_code == EXIT_NOT_INSTALLED
        assert "exists but is not executable" in capsys.readouterr().out

    def test_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        StatusCommand().execute(_args(json=True), BootstrapConfig(install_dir=tmp_path))
        assert json.loads(capsys.readouterr().out) == {
            "path": str(tmp_path / "flagdash"),
            "status": "missing",
            "version": None,
        }
