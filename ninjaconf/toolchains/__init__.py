# SPDX-License-Identifier: MIT
"""Compiler toolchains: identity, detection and flag translation."""
