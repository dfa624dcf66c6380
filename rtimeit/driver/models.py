# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Result types for the two child processes the driver spawns.

Frozen, like everything else that crosses a module boundary.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class RunState(Enum):
    """Lifecycle of one comparison run."""

    CREATED = "created"
    SOURCE_WRITTEN = "source_written"
    COMPILED = "compiled"
    EXECUTED = "executed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class BuildResult:
    """What came back from `cargo bench --no-run`."""

    executable: Path
    exit_code: int
    diagnostics: str
    elapsed_seconds: float


@dataclass(frozen=True)
class RunResult:
    """What came back from running the benchmark executable."""

    exit_code: int
    stdout: str
    stderr: str
    elapsed_seconds: float
