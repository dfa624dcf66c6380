# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for runtime bootstrap and environment checks.
"""

import logging
import signal
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from rtimeit.config.schema import GlobalConfig, RtimeitConfig
from rtimeit.logging.logger import configure_logging
from rtimeit.runtime import bootstrap as bootstrap_module
from rtimeit.runtime import environment

_REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture()
def _restore_sigterm() -> None:
    previous = signal.getsignal(signal.SIGTERM)
    yield  # type: ignore[misc]
    signal.signal(signal.SIGTERM, previous)
    configure_logging("WARNING")


class TestEnvironment:
    def test_old_python_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(environment, "get_python_version", lambda: (3, 9, 1))
        with pytest.raises(RuntimeError, match="requires Python >= 3.11"):
            environment.check_minimum_python()

    def test_current_python_accepted(self) -> None:
        environment.check_minimum_python()

    @pytest.mark.parametrize(("system", "expected"), [("Linux", True), ("Darwin", False), ("Windows", False)])
    def test_hardware_counters_need_linux(
        self, monkeypatch: pytest.MonkeyPatch, system: str, expected: bool,
    ) -> None:
        monkeypatch.setattr(environment.platform, "system", lambda: system)
        assert environment.supports_hardware_counters() is expected

    def test_missing_cargo_reported_as_none(self) -> None:
        info = environment.get_system_info("definitely-not-a-real-cargo-binary")
        assert info.cargo_path is None
        assert info.python_version


class TestTerminationHandler:
    def test_handler_raises_system_exit(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            bootstrap_module._raise_system_exit(signal.SIGTERM, None)
        assert excinfo.value.code == bootstrap_module.SIGTERM_EXIT_CODE == 143

    @pytest.mark.usefixtures("_restore_sigterm")
    def test_install_registers_handler(self) -> None:
        bootstrap_module.install_termination_handler()
        assert signal.getsignal(signal.SIGTERM) is bootstrap_module._raise_system_exit

    @pytest.mark.skipif(sys.platform == "win32", reason="SIGTERM delivery is POSIX-only")
    def test_sigterm_removes_workspace(self, tmp_path: Path) -> None:
        script = textwrap.dedent("""\
            import sys
            import time
            from pathlib import Path

            from rtimeit.driver.workspace import Workspace
            from rtimeit.runtime.bootstrap import install_termination_handler

            install_termination_handler()
            with Workspace({"Cargo.toml": ""}, base_dir=Path(sys.argv[1])) as path:
                print(path, flush=True)
                time.sleep(60)
        """)
        process = subprocess.Popen(
            [sys.executable, "-c", script, str(tmp_path)],
            stdout=subprocess.PIPE,
            text=True,
            cwd=str(_REPO_ROOT),
        )
        try:
            workspace_dir = Path(process.stdout.readline().strip())
            assert workspace_dir.is_dir()

            process.send_signal(signal.SIGTERM)
            assert process.wait(timeout=10) == 143
        finally:
            if process.poll() is None:
                process.kill()
            process.stdout.close()

        assert not workspace_dir.exists()


@pytest.mark.usefixtures("_restore_sigterm")
class TestBootstrap:
    def test_configured_level_applies_to_module_loggers(self) -> None:
        import rtimeit.driver.runner  # noqa: F401

        bootstrap_module.bootstrap(RtimeitConfig(global_config=GlobalConfig(log_level="DEBUG")))
        assert logging.getLogger("rtimeit.driver.runner").level == logging.DEBUG

    def test_cli_level_overrides_config(self) -> None:
        import rtimeit.driver.runner  # noqa: F401

        bootstrap_module.bootstrap(RtimeitConfig(), log_level="ERROR")
        assert logging.getLogger("rtimeit.driver.runner").level == logging.ERROR
