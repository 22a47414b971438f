# SPDX-License-Identifier: MIT
"""Toolchain identity.

A ToolchainInfo describes one compiler invocation name ("cc", "c++",
"nvcc", ...) once it has been resolved: which family of compiler it is,
its version, the architecture it targets and where it lives.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Family(enum.Enum):
    """Compiler families, each with its own flag table."""

    GCC = "gcc"
    CLANG = "clang"
    ARMCLANG = "armclang"
    MSVC = "msvc"
    ICC = "icc"
    NVCC = "nvcc"
    HIPCC = "hipcc"
    HCC = "hcc"
    DPCPP = "dpcpp"

    @property
    def deps_style(self) -> str:
        """Header dependency format produced by this family.

        ``msvc`` for ``/showIncludes`` output on stdout, ``gcc`` for
        Makefile-style depfiles written next to the output.
        """
        return "msvc" if self is Family.MSVC else "gcc"

    @property
    def has_rpath(self) -> bool:
        return self is not Family.MSVC


class Architecture(enum.Enum):
    """Target architectures that change flag translation."""

    INTEL = "intel"
    ARMEL = "armel"
    ARMHF = "armhf"
    AARCH64 = "aarch64"
    PPC64EL = "ppc64el"


class Language(enum.Enum):
    """Language implied by the role name used to reach a toolchain."""

    UNKNOWN = "unknown"
    C = "c"
    CPP = "c++"


# Compiler executable names and the family they belong to.
FAMILY_BY_NAME: dict[str, Family] = {
    "gcc": Family.GCC,
    "g++": Family.GCC,
    "clang": Family.CLANG,
    "clang++": Family.CLANG,
    "armclang": Family.ARMCLANG,
    "armclang++": Family.ARMCLANG,
    "cl": Family.MSVC,
    "msvc": Family.MSVC,
    "icc": Family.ICC,
    "nvcc": Family.NVCC,
    "hipcc": Family.HIPCC,
    "hcc": Family.HCC,
    "dpcpp": Family.DPCPP,
}

# Names usable as the head of a command line to invoke a compiler.
COMPILER_HEADS = frozenset(FAMILY_BY_NAME) | {
    "cc",
    "c++",
    "cuda-host-c++",
}

# Suite names accepted by -suite=, with their C and C++ executables.
SUITES: dict[str, tuple[str, str]] = {
    "gcc": ("gcc", "g++"),
    "clang": ("clang", "clang++"),
    "armclang": ("armclang", "armclang++"),
    "msvc": ("cl", "cl"),
    "icc": ("icc", "icc"),
}


def family_from_name(name: str) -> Family | None:
    """Return the family an executable or suite name denotes, if any."""
    return FAMILY_BY_NAME.get(name)


@dataclass
class ToolchainInfo:
    """A compiler reachable under a role name.

    Attributes:
        name: Role name the toolchain was requested under.
        family: Compiler family.
        path: Executable to invoke.
        version: Encoded version, ``major*10000 + minor*100 + patch``
            (``major*100 + minor`` for MSVC).
        architecture: Target architecture.
        nbits: Target pointer width.
        language: Language implied by the role name.
        fully_resolved: True once version and architecture are known.
    """

    name: str
    family: Family
    path: str
    version: int = 0
    architecture: Architecture = Architecture.INTEL
    nbits: int = 0
    language: Language = Language.UNKNOWN
    fully_resolved: bool = False

    @property
    def suite_name(self) -> str:
        """Short name of the compiler suite, language aware."""
        if self.language is Language.CPP:
            if self.family is Family.GCC:
                return "g++"
            if self.family is Family.CLANG:
                return "clang++"
        if self.family is Family.ARMCLANG:
            return "clang"
        return self.family.value

    def __str__(self) -> str:
        return (
            f'"{self.path}" version {self.version} for '
            f"{self.architecture.value} {self.nbits} bits"
        )
