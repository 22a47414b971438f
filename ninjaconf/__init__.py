# SPDX-License-Identifier: MIT
"""ninjaconf: a build-configuration generator for Ninja and Make.

ninjaconf reads a ``build.ninjaconf`` description, resolves variables,
compiler toolchains and file globs, and writes a build file for a separate
build tool to execute.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
