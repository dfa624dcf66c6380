# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
What rtimeit needs to know about the machine it runs on.

Three questions, asked once at startup:
  - is the interpreter new enough to import the rest of the package
  - can `--perf` work here (criterion-linux-perf is Linux-only)
  - which cargo will actually run, so a bad PATH shows up in the debug log
"""

import platform
import shutil
import sys
from typing import NamedTuple, Optional

MINIMUM_PYTHON = (3, 11)


class SystemInfo(NamedTuple):
    """Host facts logged next to every comparison."""

    python_version: str
    platform: str
    architecture: str
    cargo_path: Optional[str]


def get_python_version() -> tuple[int, int, int]:
    return sys.version_info[:3]


def check_minimum_python() -> None:
    """
    Refuse to run on an interpreter older than MINIMUM_PYTHON.

    Raises:
        RuntimeError: naming both the required and the running version.
    """
    major, minor, _ = get_python_version()
    if (major, minor) < MINIMUM_PYTHON:
        required = ".".join(str(part) for part in MINIMUM_PYTHON)
        raise RuntimeError(
            f"rtimeit requires Python >= {required}, "
            f"but you're running {major}.{minor}. Please upgrade."
        )


def supports_hardware_counters() -> bool:
    """criterion-linux-perf only builds on Linux."""
    return platform.system() == "Linux"


def get_system_info(cargo: str = "cargo") -> SystemInfo:
    """
    Snapshot the interpreter, OS and CPU architecture.

    `cargo_path` is where `cargo` resolves on PATH, or None when it doesn't.
    The build step reports a missing cargo on its own; this is only logged.
    """
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        cargo_path=shutil.which(cargo),
    )
