# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Command handler for the rtimeit CLI.

The handler turns parsed arguments into a Snippet, hands it to the driver,
and prints the ranked comparison. Every failure maps to exactly one exit
code. Nothing is retried.

stdout carries only the report. Structured logs and the verbatim cargo or
benchmark output of a failed run go to stderr.
"""

import argparse
import logging
import sys
from pathlib import Path

from rtimeit.cli.exit_codes import BUILD_ERROR, CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR
from rtimeit.config.exceptions import ConfigError
from rtimeit.config.loader import load_config
from rtimeit.config.schema import RtimeitConfig
from rtimeit.driver.exceptions import BuildError, RunError
from rtimeit.logging.logger import get_logger
from rtimeit.runtime.bootstrap import bootstrap
from rtimeit.snippet.models import COUNTER_NAMES, Snippet, build_snippet

PERF_HELP = "help"


def _write_diagnostics(text: str) -> None:
    if text:
        sys.stderr.write(text if text.endswith("\n") else text + "\n")
        sys.stderr.flush()


def _effective_log_level(args: argparse.Namespace) -> str | None:
    if args.log_level is not None:
        return args.log_level
    if args.verbose:
        return "INFO"
    return None


def _load_and_bootstrap(
    args: argparse.Namespace,
) -> tuple[int, RtimeitConfig | None, logging.Logger]:
    """
    Load the config file (if any) and bootstrap the runtime.

    Returns a tuple of (exit_code, config, logger). If exit_code is not
    SUCCESS, the caller should return it immediately.
    """
    log_level = _effective_log_level(args) or "WARNING"
    logger = get_logger("rtimeit.cli", log_level=log_level)

    try:
        config = load_config(Path(args.config) if args.config is not None else None)
    except ConfigError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        _write_diagnostics(str(err))
        return CONFIG_ERROR, None, logger

    bootstrap(config, log_level=_effective_log_level(args))
    return SUCCESS, config, logger


def _read_includes(paths: list[str]) -> list[str]:
    """Read every --include file up front, before any workspace exists."""
    from rtimeit.utils.filesystem import safe_read

    contents: list[str] = []
    for filename in paths:
        try:
            contents.append(safe_read(Path(filename)))
        except (OSError, UnicodeDecodeError) as err:
            raise ConfigError(f"Cannot read include file {filename}: {err}") from err
    return contents


def _snippet_from_args(args: argparse.Namespace, config: RtimeitConfig) -> Snippet:
    return build_snippet(
        args.expressions,
        setup=args.setup,
        perf=args.perf,
        dependencies=[*config.defaults.dependencies, *args.dependencies],
        uses=[*config.defaults.uses, *args.uses],
        includes=_read_includes(args.includes),
        criterion_version=config.toolchain.criterion_version,
    )


def print_counter_help() -> None:
    """The `--perf help` listing: one counter name per line, on stderr."""
    lines = ["Valid values for --perf"] + [f"  {name}" for name in COUNTER_NAMES]
    _write_diagnostics("\n".join(lines))


def handle_compare(args: argparse.Namespace) -> int:
    """Build, run and report a comparison of the expressions on the command line."""
    if args.perf == PERF_HELP:
        print_counter_help()
        return USER_ERROR

    exit_code, config, logger = _load_and_bootstrap(args)
    if exit_code != SUCCESS or config is None:
        return exit_code

    try:
        snippet = _snippet_from_args(args, config)
    except ConfigError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        _write_diagnostics(str(err))
        return CONFIG_ERROR

    from rtimeit.runtime.environment import supports_hardware_counters

    if snippet.mode.is_counter and not supports_hardware_counters():
        logger.warning(
            "Hardware counters need Linux; the build will likely fail",
            extra={"counter": snippet.mode.counter},
        )

    logger.info(
        "Comparison started",
        extra={
            "candidates": len(snippet.candidates),
            "mode": snippet.mode.kind.value,
            "counter": snippet.mode.counter,
        },
    )

    from rtimeit.driver.runner import run_comparison
    from rtimeit.results.presenter import format_json, format_table, rank_results

    try:
        results = run_comparison(snippet, config.toolchain, verbose=args.verbose)
    except BuildError as err:
        logger.error("Build failed", extra={"error": str(err)})
        _write_diagnostics(err.diagnostics or str(err))
        return BUILD_ERROR
    except RunError as err:
        logger.error("Benchmark run failed", extra={"error": str(err)})
        _write_diagnostics(err.output or str(err))
        return RUNTIME_ERROR

    ranked = rank_results(snippet.candidates, results)
    render = format_json if args.json else format_table
    sys.stdout.write(render(ranked, snippet.mode))
    sys.stdout.flush()

    return SUCCESS
