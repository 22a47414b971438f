# SPDX-License-Identifier: MIT
"""Build file generators for ninjaconf."""

from ninjaconf.generators.generator import BaseGenerator, Generator, get_generator
from ninjaconf.generators.make import MakeGenerator
from ninjaconf.generators.ninja import NinjaGenerator

__all__ = [
    "BaseGenerator",
    "Generator",
    "MakeGenerator",
    "NinjaGenerator",
    "get_generator",
]
