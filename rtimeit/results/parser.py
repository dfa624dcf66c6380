# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Parser for Criterion's report output.

Criterion prints one summary line per benchmark:

    expr0                   time:   [1.0823 ns 1.0856 ns 1.0893 ns]

The three numbers are the lower confidence bound, the point estimate and the
upper bound. Ids longer than the name column wrap, with the id on its own
line and the `time:` line indented below it. Both shapes are handled.

Results are matched to candidates by the synthesized id the unit was
registered under. Lines for ids nobody asked about are ignored, and an id
that never shows up is an error.
"""

import re
from typing import Sequence

from rtimeit.driver.exceptions import RunError
from rtimeit.results.models import MeasurementResult
from rtimeit.snippet.models import Candidate, MeasurementMode

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

_NUMBER = r"[-+]?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?"

_REPORT_LINE = re.compile(
    r"^(?P<id>\S+)?\s*time:\s*\[\s*"
    rf"(?P<lower>{_NUMBER})\s*(?P<lower_unit>\S+)\s+"
    rf"(?P<estimate>{_NUMBER})\s*(?P<estimate_unit>\S+)\s+"
    rf"(?P<upper>{_NUMBER})\s*(?P<upper_unit>\S+)\s*\]"
)

# Multipliers to nanoseconds. Both the micro sign and the Greek mu show up
# in the wild, depending on the Criterion version.
TIME_UNITS: dict[str, float] = {
    "ps": 1e-3,
    "ns": 1.0,
    "µs": 1e3,
    "μs": 1e3,
    "us": 1e3,
    "ms": 1e6,
    "s": 1e9,
}

_COUNT_PREFIXES: dict[str, float] = {"k": 1e3, "K": 1e3, "M": 1e6, "G": 1e9}

# (lower, estimate, upper), each as the raw (value, unit) pair from the report line.
_Report = tuple[tuple[str, str], tuple[str, str], tuple[str, str]]


def strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


def _scale(value: str, unit: str, mode: MeasurementMode) -> float:
    """Convert one reported value into the mode's base unit."""
    number = float(value)

    if not mode.is_counter:
        if unit not in TIME_UNITS:
            raise RunError(f"Unrecognized time unit '{unit}' in benchmark output")
        return number * TIME_UNITS[unit]

    # Counter values may be scaled with an SI prefix, e.g. "1.2 Kcycles".
    if len(unit) > 1 and unit[0] in _COUNT_PREFIXES and not unit[1].isupper():
        return number * _COUNT_PREFIXES[unit[0]]
    return number


def parse_report_lines(output: str) -> dict[str, _Report]:
    """
    Extract raw (value, unit) triples keyed by benchmark id.

    The first report for an id wins. Criterion prints each id once per run.
    """
    reports: dict[str, _Report] = {}
    previous = ""

    for raw_line in strip_ansi(output).splitlines():
        line = raw_line.rstrip()
        match = _REPORT_LINE.match(line)
        if match is None:
            if line.strip():
                previous = line.strip()
            continue

        bench_id = match.group("id")
        if bench_id is None and previous:
            # Wrapped report: the id was printed alone on the line before.
            bench_id = previous.split()[0]
        if bench_id is not None and bench_id not in reports:
            reports[bench_id] = (
                (match.group("lower"), match.group("lower_unit")),
                (match.group("estimate"), match.group("estimate_unit")),
                (match.group("upper"), match.group("upper_unit")),
            )
        previous = ""

    return reports


def parse_measurements(
    output: str,
    candidates: Sequence[Candidate],
    mode: MeasurementMode,
) -> list[MeasurementResult]:
    """
    Turn benchmark output into one MeasurementResult per candidate, in candidate order.

    Raises:
        RunError: a candidate's id has no report line, or a value can't be read.
    """
    reports = parse_report_lines(output)
    results: list[MeasurementResult] = []
    missing: list[str] = []

    for candidate in candidates:
        report = reports.get(candidate.candidate_id)
        if report is None:
            missing.append(candidate.candidate_id)
            continue

        (lower, lower_unit), (estimate, estimate_unit), (upper, upper_unit) = report
        results.append(MeasurementResult(
            candidate_id=candidate.candidate_id,
            index=candidate.index,
            estimate=_scale(estimate, estimate_unit, mode),
            lower_bound=_scale(lower, lower_unit, mode),
            upper_bound=_scale(upper, upper_unit, mode),
            unit=mode.unit,
        ))

    if missing:
        raise RunError(
            f"No measurement found for {', '.join(missing)}",
            output=output,
        )

    return results
