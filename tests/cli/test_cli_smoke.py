# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI smoke tests.

We use subprocess to run the actual CLI entrypoint the way a user would.
This catches broken imports and entrypoint wiring that unit tests miss.
None of these reach cargo: each one stops at argument or config handling.
"""

import subprocess
import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[2]


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    """Run `rtimeit` with the given arguments and capture output."""
    return subprocess.run(
        [sys.executable, "-m", "rtimeit.cli.main", *args],
        capture_output=True,
        text=True,
        timeout=30,
        cwd=str(_REPO_ROOT),
    )


class TestHelpText:
    def test_help_exits_zero(self) -> None:
        result = _run_cli("--help")
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()
        assert "--perf" in result.stdout

    def test_counter_listing(self) -> None:
        result = _run_cli("--perf", "help")
        assert result.returncode == 1
        assert "instructions" in result.stderr
        assert result.stdout == ""


class TestUserErrors:
    def test_no_expressions_is_config_error(self) -> None:
        result = _run_cli()
        assert result.returncode == 2
        assert "at least one expression" in result.stderr

    def test_unknown_counter_is_config_error(self) -> None:
        result = _run_cli("--perf", "bogus", "1 + 1")
        assert result.returncode == 2
        assert "bogus" in result.stderr

    def test_missing_config_file_is_config_error(self, tmp_path: Path) -> None:
        result = _run_cli("--config", str(tmp_path / "nope.yaml"), "1 + 1")
        assert result.returncode == 2

    @pytest.mark.parametrize("level", ["debug", "LOUD"])
    def test_bad_log_level_is_rejected_by_argparse(self, level: str) -> None:
        result = _run_cli("--log-level", level, "1 + 1")
        assert result.returncode == 2
        assert "invalid choice" in result.stderr


class TestDriverLogging:
    def test_log_level_and_file_reach_the_driver(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "rtimeit.log"
        config_file = tmp_path / "rtimeit.yaml"
        config_file.write_text(
            f"global:\n  log_file: {str(log_file)!r}\n"
            "toolchain:\n  cargo: /nonexistent/cargo\n",
            encoding="utf-8",
        )

        result = _run_cli("--config", str(config_file), "--log-level", "DEBUG", "1 + 1")

        assert result.returncode == 4
        assert "Compiling benchmark" in result.stderr
        assert "State transition" in result.stderr
        assert result.stdout == ""

        logged = log_file.read_text(encoding="utf-8")
        assert "Compiling benchmark" in logged
        assert "Workspace cleaned up" in logged
