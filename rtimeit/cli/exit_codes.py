# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes.

One code per terminal outcome of an invocation, so scripts can tell a typo
in the config from an expression that doesn't compile.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
BUILD_ERROR: int = 4
INTERRUPTED: int = 130
