# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for rtimeit.

The one-time setup that happens before the snippet is built:
  1. Validate the environment (Python version)
  2. Apply the configured log level and log file
  3. Turn SIGTERM into SystemExit, so the workspace context manager unwinds
     and removes its directory when the process is asked to stop

After bootstrap the process either runs to completion or unwinds through
normal exception handling. There is no other exit path.
"""

import signal
from pathlib import Path
from types import FrameType
from typing import Optional

from rtimeit.config.schema import RtimeitConfig
from rtimeit.logging.logger import configure_logging, get_logger
from rtimeit.runtime.environment import check_minimum_python, get_system_info

# Conventional shell exit status for "terminated by SIGTERM".
SIGTERM_EXIT_CODE = 128 + signal.SIGTERM


def _raise_system_exit(signum: int, frame: Optional[FrameType]) -> None:
    raise SystemExit(128 + signum)


def install_termination_handler() -> None:
    """
    Make SIGTERM unwind the stack like Ctrl-C does.

    Python's default SIGTERM action kills the process without running
    `finally` blocks or `__exit__`, which would leave the workspace behind.
    """
    signal.signal(signal.SIGTERM, _raise_system_exit)


def bootstrap(config: RtimeitConfig, log_level: Optional[str] = None) -> None:
    """
    Prepare the process for a comparison run.

    Args:
        config: The validated config (defaults when no file was given).
        log_level: CLI override for the configured log level.
    """
    check_minimum_python()

    level = log_level or config.global_config.log_level
    log_file = Path(config.global_config.log_file) if config.global_config.log_file else None
    configure_logging(level, log_file=log_file)

    install_termination_handler()

    logger = get_logger("rtimeit.runtime", log_level=level, log_file=log_file)
    system_info = get_system_info(config.toolchain.cargo)
    logger.info(
        "rtimeit bootstrap complete",
        extra={
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "cargo": system_info.cargo_path,
        },
    )
