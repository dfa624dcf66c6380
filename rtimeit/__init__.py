# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
rtimeit: compare the speed of small Rust expressions from the command line.
"""

__version__ = "0.1.0"
