# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The typed form of what the user typed: candidate expressions, shared setup
code and the measurement mode. Everything downstream reads from here.
"""
