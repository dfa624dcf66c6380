# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Snippet model: the validated, immutable description of one comparison run.

All types are frozen dataclasses. A Snippet is built once from the command
line and then only read: the synthesizer renders it, the driver runs it, the
presenter labels its rows with it.

Validation happens here and only here, before any workspace or child process
exists. Candidate code itself is never inspected; cargo is the only judge of
whether an expression compiles.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from rtimeit.config.exceptions import ConfigError

# Counter names accepted by --perf, mapped to criterion-linux-perf's PerfMode variants.
COUNTERS: dict[str, str] = {
    "cycles": "Cycles",
    "instructions": "Instructions",
    "branches": "Branches",
    "branch-misses": "BranchMisses",
    "cache-refs": "CacheRefs",
    "cache-misses": "CacheMisses",
    "bus-cycles": "BusCycles",
    "ref-cycles": "RefCycles",
}

COUNTER_NAMES: tuple[str, ...] = tuple(COUNTERS)

DEFAULT_CRITERION_VERSION = "0.3"


class MeasurementKind(Enum):
    WALL_CLOCK = "wall-clock"
    HARDWARE_COUNTER = "hardware-counter"


@dataclass(frozen=True)
class MeasurementMode:
    """
    What the generated benchmark measures: wall time, or one perf counter.

    Use the WALL_CLOCK constant or `MeasurementMode.counter_mode(name)` rather
    than building instances by hand.
    """

    kind: MeasurementKind
    counter: Optional[str] = None

    @classmethod
    def counter_mode(cls, name: str) -> "MeasurementMode":
        if name not in COUNTERS:
            raise ConfigError(
                f"Unknown counter '{name}'. Valid counters: {', '.join(COUNTER_NAMES)}"
            )
        return cls(kind=MeasurementKind.HARDWARE_COUNTER, counter=name)

    @property
    def is_counter(self) -> bool:
        return self.kind is MeasurementKind.HARDWARE_COUNTER

    @property
    def perf_variant(self) -> Optional[str]:
        """The Rust `PerfMode` variant name, or None for wall clock."""
        if self.counter is None:
            return None
        return COUNTERS[self.counter]

    @property
    def unit(self) -> str:
        """Unit of the values the benchmark reports: nanoseconds or the counter name."""
        return self.counter if self.counter is not None else "ns"


WALL_CLOCK = MeasurementMode(kind=MeasurementKind.WALL_CLOCK)


@dataclass(frozen=True)
class Candidate:
    """
    One expression being compared.

    The identifier is derived from the position alone, so duplicate
    expressions or ones full of punctuation are registered and matched
    exactly like any other.
    """

    index: int
    text: str

    @property
    def candidate_id(self) -> str:
        return f"expr{self.index}"


@dataclass(frozen=True)
class Snippet:
    """
    Everything the synthesizer needs to emit a benchmark project.

    candidates  : ordered expressions, at least one
    setup       : code run before timing in every measured unit, or None
    mode        : wall clock or a hardware counter
    dependencies: extra lines for the generated [dependencies] table
    uses        : extra `use` paths
    includes    : verbatim source text pasted at module level
    """

    candidates: tuple[Candidate, ...]
    setup: Optional[str] = None
    mode: MeasurementMode = WALL_CLOCK
    dependencies: tuple[str, ...] = field(default_factory=tuple)
    uses: tuple[str, ...] = field(default_factory=tuple)
    includes: tuple[str, ...] = field(default_factory=tuple)
    criterion_version: str = DEFAULT_CRITERION_VERSION

    @property
    def candidate_ids(self) -> list[str]:
        return [candidate.candidate_id for candidate in self.candidates]


def parse_measurement_mode(perf: Optional[str]) -> MeasurementMode:
    """Turn the optional --perf value into a MeasurementMode."""
    if perf is None:
        return WALL_CLOCK
    return MeasurementMode.counter_mode(perf.strip())


def format_dependency(spec: str) -> str:
    """
    Normalize one --dependency value into a Cargo.toml [dependencies] line.

      "rand"               -> rand = "*"
      "rand@0.8"           -> rand = "0.8"
      'rand = { ... }'     -> passed through as written
    """
    spec = spec.strip()
    if not spec:
        raise ConfigError("Dependency specification must not be empty")
    if "=" in spec:
        return spec

    name, _, version = spec.partition("@")
    name = name.strip()
    version = version.strip() or "*"
    if not name:
        raise ConfigError(f"Dependency specification has no crate name: '{spec}'")
    return f'{name} = "{version}"'


def build_snippet(
    expressions: Iterable[str],
    setup: Optional[str] = None,
    perf: Optional[str] = None,
    dependencies: Iterable[str] = (),
    uses: Iterable[str] = (),
    includes: Iterable[str] = (),
    criterion_version: str = DEFAULT_CRITERION_VERSION,
) -> Snippet:
    """
    Validate user input and freeze it into a Snippet.

    Raises:
        ConfigError: no expressions, an unknown counter name, or an
                     empty dependency specification.
    """
    candidates = tuple(
        Candidate(index=index, text=text) for index, text in enumerate(expressions)
    )
    if not candidates:
        raise ConfigError("Please specify at least one expression")

    mode = parse_measurement_mode(perf)

    return Snippet(
        candidates=candidates,
        setup=setup,
        mode=mode,
        dependencies=tuple(format_dependency(dep) for dep in dependencies),
        uses=tuple(use.strip() for use in uses if use.strip()),
        includes=tuple(includes),
        criterion_version=criterion_version,
    )
