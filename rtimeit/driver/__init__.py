# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build & run driver.

Subsystems:
  - workspace: the scoped temporary Cargo project
  - toolchain: cargo and benchmark-binary child processes
  - runner: the state machine that ties them together
"""
