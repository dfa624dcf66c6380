# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Benchmark harness synthesis.

Turns a Snippet into the text of a self-contained Cargo project: a manifest
and one Criterion bench target with a measured unit per candidate. Nothing in
this package touches the filesystem.
"""
