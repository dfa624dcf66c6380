# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for rtimeit.

Usage:
    rtimeit 'x.pow(2)' 'x * x' --setup 'let x = black_box(7u64)'
    rtimeit --perf instructions 'v.iter().sum::<u64>()' 'v.iter().fold(0, |a, b| a + b)' \
        -s 'let v: Vec<u64> = (0..1000).collect()'
    rtimeit --perf help
"""

import argparse
import sys

from rtimeit.cli.commands import handle_compare
from rtimeit.cli.exit_codes import INTERRUPTED


def build_parser() -> argparse.ArgumentParser:
    """The single rtimeit command and its options."""
    parser = argparse.ArgumentParser(
        prog="rtimeit",
        description="Tool for measuring execution time of small Rust code snippets.",
    )
    parser.add_argument(
        "expressions",
        nargs="*",
        metavar="EXPRESSION",
        help="Rust expression to measure; give several to compare them.",
    )
    parser.add_argument(
        "-s",
        "--setup",
        type=str,
        default=None,
        help="Code to be executed once before timing begins.",
    )
    parser.add_argument(
        "-p",
        "--perf",
        type=str,
        default=None,
        metavar="COUNTER",
        help="Use a hardware performance counter instead of wall time "
        "(use `--perf help` to list the counters).",
    )
    parser.add_argument(
        "-d",
        "--dependency",
        action="append",
        default=[],
        dest="dependencies",
        metavar="SPEC",
        help="Crate to add to the dependencies section: NAME, NAME@VERSION or a raw TOML line.",
    )
    parser.add_argument(
        "-u",
        "--use",
        action="append",
        default=[],
        dest="uses",
        metavar="PATH",
        help='Add an extra "use" line.',
    )
    parser.add_argument(
        "-i",
        "--include",
        action="append",
        default=[],
        dest="includes",
        metavar="FILE",
        help="Include the named file's contents in the source code.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log progress and pass --verbose to the benchmark.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the comparison as JSON instead of a table.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (default: WARNING, INFO with --verbose).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    Parses the command line, runs the comparison and exits with the handler's
    code. Ctrl-C exits with 130 after the workspace has been cleaned up.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        exit_code = handle_compare(args)
    except KeyboardInterrupt:
        sys.stderr.write("Interrupted\n")
        exit_code = INTERRUPTED

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
