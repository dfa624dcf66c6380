# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Failures of the build and run steps.

Both carry the raw text of the child process so the CLI can show it to the
user verbatim. Neither is ever retried.
"""


class DriverError(Exception):
    """Base for failures after configuration was accepted."""


class BuildError(DriverError):
    """cargo could not produce the benchmark executable."""

    def __init__(self, message: str, diagnostics: str = "") -> None:
        super().__init__(message)
        self.diagnostics = diagnostics


class RunError(DriverError):
    """The benchmark executable failed, or its output could not be read."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output
