# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Harness synthesizer.

Renders the two files of the generated benchmark project from a Snippet.
Both functions are pure: the same Snippet always produces byte-identical
text, which is what makes golden-output tests possible.

Candidate expressions are treated as opaque text. They are pasted verbatim
into the unit template and never parsed, escaped or validated here. If an
expression doesn't compile, cargo says so and the driver reports it.
"""

import re

from rtimeit.harness.templates import (
    BENCH_NAME,
    BENCH_SOURCE,
    CARGO_TOML,
    PACKAGE_NAME,
    PERF_CRATE_VERSION,
    PERF_FEATURE,
    PERF_TIMER,
    UNIT_SOURCE,
    WALL_TIMER,
)
from rtimeit.snippet.models import Candidate, MeasurementMode, Snippet

_SOURCE_MARKER = re.compile(r"/\*([A-Z_]+)\*/")
_TOML_MARKER = re.compile(r"@([A-Z_]+)@")


def _substitute(pattern: re.Pattern[str], template: str, values: dict[str, str]) -> str:
    """Replace every known marker in one pass. Unknown markers are left alone."""

    def _replace(match: re.Match[str]) -> str:
        return values.get(match.group(1), match.group(0))

    return pattern.sub(_replace, template)


def render_cargo_toml(snippet: Snippet) -> str:
    """Render the project manifest, including any extra user dependencies."""
    return _substitute(
        _TOML_MARKER,
        CARGO_TOML,
        {
            "PACKAGE": PACKAGE_NAME,
            "CRITERION": snippet.criterion_version,
            "PERF_VERSION": PERF_CRATE_VERSION,
            "DEPENDENCIES": "".join(f"{line}\n" for line in snippet.dependencies),
            "FEATURE": PERF_FEATURE,
            "BENCH": BENCH_NAME,
        },
    )


def render_setup(setup: str | None) -> str:
    if setup is None:
        return ""
    return f"{setup};"


def render_unit(candidate: Candidate, setup: str | None) -> str:
    """One bench_function registration, tagged with the candidate's synthesized id."""
    return _substitute(
        _SOURCE_MARKER,
        UNIT_SOURCE,
        {
            "ID": candidate.candidate_id,
            "SETUP": render_setup(setup),
            "EXPRESSION": candidate.text,
        },
    )


def render_timer(mode: MeasurementMode) -> str:
    """The Criterion measurement expression for the selected mode."""
    if mode.perf_variant is None:
        return WALL_TIMER
    return _substitute(_SOURCE_MARKER, PERF_TIMER, {"VARIANT": mode.perf_variant})


def render_prelude(snippet: Snippet) -> str:
    """
    Module-level code ahead of the bench function: extra `use` lines, then
    each included file. Every block is followed by one blank line.
    """
    blocks: list[str] = []
    if snippet.uses:
        blocks.append("".join(f"use {path};\n" for path in snippet.uses))
    blocks.extend(snippet.includes)
    return "".join(block.rstrip("\n") + "\n\n" for block in blocks if block.strip())


def render_bench_source(snippet: Snippet) -> str:
    """Render benches/timeit.rs with one measured unit per candidate, in input order."""
    units = "\n".join(
        render_unit(candidate, snippet.setup) for candidate in snippet.candidates
    ).rstrip("\n")

    return _substitute(
        _SOURCE_MARKER,
        BENCH_SOURCE,
        {
            "PRELUDE": render_prelude(snippet),
            "UNITS": units,
            "TIMER": render_timer(snippet.mode),
        },
    )


def synthesize(snippet: Snippet) -> dict[str, str]:
    """
    Render the whole project as a {relative path: content} mapping.

    This is what the workspace writes to disk. Keys are POSIX-style
    relative paths.
    """
    return {
        "Cargo.toml": render_cargo_toml(snippet),
        f"benches/{BENCH_NAME}.rs": render_bench_source(snippet),
    }
