# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Child-process wrappers for cargo and the compiled benchmark.

Two commands, nothing else:
  - `cargo bench --no-run`, which compiles the bench target with the
    optimized bench profile and reports the executable path as JSON
  - the benchmark executable itself, which runs Criterion's sampling loop

Each runs through subprocess.run with captured output, no shell, and the
caller blocks until it exits. Criterion owns warm-up, sample counts and
outlier handling; nothing here tries to influence them.
"""

import json
import os
import subprocess
import time
from pathlib import Path

from rtimeit.config.schema import ToolchainConfig
from rtimeit.driver.exceptions import BuildError, RunError
from rtimeit.driver.models import BuildResult, RunResult
from rtimeit.harness.templates import BENCH_NAME, PERF_FEATURE
from rtimeit.logging.logger import get_logger
from rtimeit.snippet.models import MeasurementMode

logger = get_logger(__name__)

CRITERION_DIR = "criterion"

_ERROR_LEVELS = frozenset({"error", "error: internal compiler error"})


def build_command(workspace_dir: Path, mode: MeasurementMode, config: ToolchainConfig) -> list[str]:
    """
    The cargo invocation for a workspace.

    Only the feature flag depends on the measurement mode: counter mode
    switches on the optional criterion-linux-perf dependency.
    """
    command = [
        config.cargo,
        "bench",
        "--no-run",
        "--bench",
        BENCH_NAME,
        "--message-format",
        "json",
        "--manifest-path",
        str(workspace_dir / "Cargo.toml"),
    ]
    if mode.is_counter:
        command.extend(["--features", PERF_FEATURE])
    return command


def run_command(executable: Path, verbose: bool = False) -> list[str]:
    """The benchmark invocation, mirroring what `cargo bench` would pass."""
    command = [str(executable), "--bench", "--noplot"]
    if verbose:
        command.append("--verbose")
    return command


def _build_env(config: ToolchainConfig) -> dict[str, str]:
    """
    The environment for child processes.

    Inherits the parent environment so rustup, proxies and registry
    credentials keep working.
    """
    env = dict(os.environ)
    if config.offline:
        env["CARGO_NET_OFFLINE"] = "true"
    if config.target_dir is not None:
        env["CARGO_TARGET_DIR"] = str(Path(config.target_dir).expanduser().resolve())
    return env


def _run_env(config: ToolchainConfig, workspace_dir: Path) -> dict[str, str]:
    """
    The environment for the benchmark executable.

    Criterion keeps its baselines under CRITERION_HOME, falling back to
    CARGO_TARGET_DIR. Pinning it inside the workspace means a shared
    target_dir never carries one run's `expr0` baseline into the next.
    """
    env = _build_env(config)
    env["CRITERION_HOME"] = str(workspace_dir / CRITERION_DIR)
    return env


def parse_cargo_messages(stdout: str) -> tuple[Path | None, list[str]]:
    """
    Read cargo's --message-format json stream.

    Returns the path of the compiled bench executable (None if cargo never
    reported one) and the rendered text of every error-level diagnostic.
    Lines that aren't JSON are skipped; build scripts may print anything.
    """
    executable: Path | None = None
    errors: list[str] = []

    for line in stdout.splitlines():
        line = line.strip()
        if not line.startswith("{"):
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError:
            continue

        reason = message.get("reason")
        if reason == "compiler-artifact":
            target = message.get("target") or {}
            if (
                message.get("executable")
                and target.get("name") == BENCH_NAME
                and "bench" in target.get("kind", [])
            ):
                executable = Path(message["executable"])
        elif reason == "compiler-message":
            diagnostic = message.get("message") or {}
            if diagnostic.get("level") in _ERROR_LEVELS:
                errors.append(diagnostic.get("rendered") or diagnostic.get("message", ""))

    return executable, errors


def build_benchmark(
    workspace_dir: Path,
    mode: MeasurementMode,
    config: ToolchainConfig,
) -> BuildResult:
    """
    Compile the workspace's bench target and return the executable path.

    Raises:
        BuildError: cargo missing, timed out, exited non-zero, reported an
                    error diagnostic, or produced no bench executable. The
                    exception carries cargo's diagnostics verbatim.
    """
    command = build_command(workspace_dir, mode, config)
    start = time.monotonic()

    logger.info("Compiling benchmark", extra={"command": command})

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=config.timeout_seconds,
            cwd=str(workspace_dir),
            env=_build_env(config),
        )
    except subprocess.TimeoutExpired as err:
        raise BuildError(
            f"Compilation timed out after {config.timeout_seconds}s",
        ) from err
    except FileNotFoundError as err:
        logger.error(
            "cargo not found, is Rust installed?",
            extra={"cargo": config.cargo},
        )
        raise BuildError(f"cargo executable not found: {config.cargo}") from err

    elapsed = time.monotonic() - start
    executable, errors = parse_cargo_messages(result.stdout)
    diagnostics = "\n".join(errors + ([result.stderr] if result.stderr else []))

    logger.debug(
        "Compilation finished",
        extra={
            "exit_code": result.returncode,
            "elapsed_seconds": round(elapsed, 3),
            "error_count": len(errors),
            "workspace": str(workspace_dir),
        },
    )

    if result.returncode != 0 or errors:
        raise BuildError(
            f"Compilation failed with exit code {result.returncode}",
            diagnostics=diagnostics,
        )
    if executable is None:
        raise BuildError(
            "cargo did not report a benchmark executable",
            diagnostics=diagnostics,
        )

    return BuildResult(
        executable=executable,
        exit_code=result.returncode,
        diagnostics=diagnostics,
        elapsed_seconds=elapsed,
    )


def run_benchmark(
    executable: Path,
    workspace_dir: Path,
    config: ToolchainConfig,
    verbose: bool = False,
) -> RunResult:
    """
    Run the compiled benchmark to completion and capture its output.

    The working directory and CRITERION_HOME both point into the workspace,
    so Criterion's data files disappear with it even when target_dir is shared.

    Raises:
        RunError: the executable couldn't start, timed out, or exited
                  non-zero. The exception carries everything it printed.
    """
    command = run_command(executable, verbose=verbose)
    start = time.monotonic()

    logger.info("Running benchmark", extra={"command": command})

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=config.timeout_seconds,
            cwd=str(workspace_dir),
            env=_run_env(config, workspace_dir),
        )
    except subprocess.TimeoutExpired as err:
        raise RunError(
            f"Benchmark timed out after {config.timeout_seconds}s",
        ) from err
    except OSError as err:
        raise RunError(f"Could not start benchmark executable {executable}: {err}") from err

    elapsed = time.monotonic() - start

    logger.debug(
        "Benchmark finished",
        extra={"exit_code": result.returncode, "elapsed_seconds": round(elapsed, 3)},
    )

    if result.returncode != 0:
        raise RunError(
            f"Benchmark exited with code {result.returncode}",
            output=result.stdout + result.stderr,
        )

    return RunResult(
        exit_code=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
        elapsed_seconds=elapsed,
    )
