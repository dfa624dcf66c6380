# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Comparison report: ranking and rendering.

Results are sorted by point estimate, fastest first. An entry whose estimate
falls inside the confidence interval of the entry that opened the current
group shares that group's rank; Criterion can't tell them apart, so neither
do we. Within a group, entries keep their command-line order.

The relative factor is always against the single fastest estimate, so the
fastest row reads 1.00x and something five times slower reads 5.00x.
"""

import json
import math
from typing import Sequence

from rtimeit.results.models import MeasurementResult, RankedResult
from rtimeit.snippet.models import Candidate, MeasurementMode

# Largest unit first; the first one the value reaches wins.
_TIME_SCALE: list[tuple[float, str]] = [
    (1e9, "s"),
    (1e6, "ms"),
    (1e3, "µs"),
    (1.0, "ns"),
]


def _within_group(leader: MeasurementResult, result: MeasurementResult) -> bool:
    return result.estimate == leader.estimate or result.estimate <= leader.upper_bound


def relative_factor(estimate: float, fastest: float) -> float:
    if fastest == 0:
        return 1.0 if estimate == 0 else math.inf
    return estimate / fastest


def rank_results(
    candidates: Sequence[Candidate],
    results: Sequence[MeasurementResult],
) -> list[RankedResult]:
    """
    Order results fastest first, grouping statistical ties into one rank.
    """
    if not results:
        return []

    texts = {candidate.candidate_id: candidate.text for candidate in candidates}
    ordered = sorted(results, key=lambda result: (result.estimate, result.index))

    groups: list[list[MeasurementResult]] = []
    for result in ordered:
        if groups and _within_group(groups[-1][0], result):
            groups[-1].append(result)
        else:
            groups.append([result])

    fastest = ordered[0].estimate
    ranked: list[RankedResult] = []
    for rank, group in enumerate(groups, start=1):
        for result in sorted(group, key=lambda result: result.index):
            ranked.append(RankedResult(
                result=result,
                text=texts[result.candidate_id],
                rank=rank,
                factor=relative_factor(result.estimate, fastest),
            ))

    return ranked


def format_value(value: float, unit: str) -> str:
    """Human-readable value: times get a scaled unit, counts keep theirs."""
    if unit != "ns":
        return f"{value:,.2f} {unit}"

    magnitude = abs(value)
    for scale, label in _TIME_SCALE:
        if magnitude >= scale:
            return f"{value / scale:.2f} {label}"
    return f"{value * 1e3:.2f} ps"


def format_factor(factor: float) -> str:
    if math.isinf(factor):
        return "inf"
    return f"{factor:.2f}x"


def _display_text(text: str) -> str:
    """Expressions are shown on one line; internal whitespace runs collapse."""
    return " ".join(text.split())


def format_table(ranked: Sequence[RankedResult], mode: MeasurementMode) -> str:
    """
    Render the comparison as a plain-text table.

        rank  expression   estimate            relative
        ----  ----------   --------            --------
        1     a + b        1.02 ns ± 0.01 ns   1.00x
        2     a.pow(2)     5.10 ns ± 0.02 ns   5.00x
    """
    headers = ("rank", "expression", mode.unit if mode.is_counter else "time", "relative")
    rows = [
        (
            str(entry.rank),
            _display_text(entry.text),
            f"{format_value(entry.result.estimate, entry.result.unit)}"
            f" ± {format_value(entry.result.half_width, entry.result.unit)}",
            format_factor(entry.factor),
        )
        for entry in ranked
    ]

    widths = [
        max([len(headers[column])] + [len(row[column]) for row in rows])
        for column in range(len(headers))
    ]

    def _line(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [_line(headers), _line(["-" * width for width in widths])]
    lines.extend(_line(row) for row in rows)
    return "\n".join(lines) + "\n"


def format_json(ranked: Sequence[RankedResult], mode: MeasurementMode) -> str:
    """The same report as JSON, for scripts. Raw values, no unit scaling."""

    def _finite(value: float) -> float | None:
        return None if math.isinf(value) or math.isnan(value) else value

    payload = {
        "mode": mode.kind.value,
        "counter": mode.counter,
        "unit": mode.unit,
        "results": [
            {
                "rank": entry.rank,
                "index": entry.result.index,
                "id": entry.result.candidate_id,
                "expression": entry.text,
                "estimate": entry.result.estimate,
                "lower_bound": entry.result.lower_bound,
                "upper_bound": entry.result.upper_bound,
                "factor": _finite(entry.factor),
            }
            for entry in ranked
        ],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
