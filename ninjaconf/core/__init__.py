# SPDX-License-Identifier: MIT
"""Core of ninjaconf: the description language and the rule graph."""
