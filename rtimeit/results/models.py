# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for measurements.

A MeasurementResult is tied to its candidate by `candidate_id`, the synthesized
identifier the unit was registered under, and never by expression text.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MeasurementResult:
    """
    Criterion's estimate for one candidate.

    Values are in `unit`: nanoseconds for wall clock, raw counts for a
    hardware counter. The bounds are the engine's confidence interval.
    """

    candidate_id: str
    index: int
    estimate: float
    lower_bound: float
    upper_bound: float
    unit: str

    @property
    def half_width(self) -> float:
        return (self.upper_bound - self.lower_bound) / 2


@dataclass(frozen=True)
class RankedResult:
    """One row of the comparison: a result, its expression, and where it placed."""

    result: MeasurementResult
    text: str
    rank: int
    factor: float
