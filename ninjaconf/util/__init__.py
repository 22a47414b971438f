# SPDX-License-Identifier: MIT
"""Utility modules shared by the interpreter, toolchains and generators."""
