# SPDX-License-Identifier: MIT
"""Compiler discovery and identification.

Command lines name compilers by role ("cc", "c++", "nvcc", ...). The
registry maps each role to a ToolchainInfo, either declared on the
command line or detected on the host, and fills in the version and
target architecture by running the compiler once and parsing what it
prints. Results are memoized for the whole run.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import TYPE_CHECKING

from ninjaconf.core.errors import ToolchainError
from ninjaconf.shell.commands import stringify
from ninjaconf.toolchains.toolchain import (
    SUITES,
    Architecture,
    Family,
    Language,
    ToolchainInfo,
    family_from_name,
)

if TYPE_CHECKING:
    from ninjaconf.configure.platform import Platform
    from ninjaconf.util.host import HostSystem

logger = logging.getLogger(__name__)

COMPILER_INFOS_DIR = "_compiler_infos"

CUDA_HOST_NAME = "cuda-host-c++"

# Candidates tried, in order, when a generic role is not declared.
_POSIX_CANDIDATES: dict[str, tuple[tuple[str, Family], ...]] = {
    "cc": (("clang", Family.CLANG), ("gcc", Family.GCC)),
    "c++": (("clang++", Family.CLANG), ("g++", Family.GCC)),
}
_WINDOWS_CANDIDATES: dict[str, tuple[tuple[str, Family], ...]] = {
    "cc": (("cl", Family.MSVC), ("clang", Family.CLANG), ("gcc", Family.GCC)),
    "c++": (("cl", Family.MSVC), ("clang++", Family.CLANG), ("g++", Family.GCC)),
}

_ARCH_BY_NAME: dict[str, tuple[Architecture, int]] = {
    "x86": (Architecture.INTEL, 32),
    "x86_64": (Architecture.INTEL, 64),
    "arm": (Architecture.ARMEL, 32),
    "armel": (Architecture.ARMEL, 32),
    "armhf": (Architecture.ARMHF, 32),
    "aarch64": (Architecture.AARCH64, 64),
    "ppc64le": (Architecture.PPC64EL, 64),
}

_MSVC_ARCH: dict[str, tuple[Architecture, int]] = {
    "x64": (Architecture.INTEL, 64),
    "x86": (Architecture.INTEL, 32),
    "ARM": (Architecture.ARMEL, 32),
    "ARM64": (Architecture.AARCH64, 64),
}

_I386_RE = re.compile(r"i[3-6]86")
_VERSION_WORD_RE = re.compile(r"^[0-9.]*[0-9][0-9.]*$")


def language_of(name: str) -> Language:
    """Language implied by a role or executable name."""
    if name in ("cc", "gcc", "clang", "armclang"):
        return Language.C
    if name.endswith("++"):
        return Language.CPP
    return Language.UNKNOWN


def version_digits(line: str) -> list[str]:
    """Return the dotted components of the first version number in ``line``.

    >>> version_digits("gcc version 11.4.0 (Ubuntu 11.4.0-1ubuntu1~22.04)")
    ['11', '4', '0']
    """
    for char in "+-,":
        line = line.replace(char, " ")
    for word in line.split():
        if _VERSION_WORD_RE.match(word):
            return [d for d in word.split(".") if d]
    return []


def encode_version(digits: list[str], family: Family) -> int:
    """Encode version components as a comparable integer.

    ``major*10000 + minor*100 + patch`` with minor and patch capped at
    99, ``major*100 + minor`` for MSVC.
    """
    numbers = [int(d) for d in digits[:3]] + [0] * (3 - min(len(digits), 3))
    if family is Family.MSVC:
        return numbers[0] * 100 + min(numbers[1], 99)
    return numbers[0] * 10000 + min(numbers[1], 99) * 100 + min(numbers[2], 99)


def parse_architecture(name: str) -> tuple[Architecture, int]:
    """Decode an architecture given on the command line.

    Raises:
        ToolchainError: If the name is not one of x86, x86_64, arm,
            armel, armhf, aarch64 or ppc64le.
    """
    try:
        return _ARCH_BY_NAME[name]
    except KeyError:
        raise ToolchainError(
            f"unknown architecture '{name}', expected one of "
            + ", ".join(_ARCH_BY_NAME)
        ) from None


class ToolchainRegistry:
    """Role name to toolchain mapping for one run.

    Attributes:
        host: Process and filesystem access.
        platform: Host platform, decides the auto-detection order.
        build_dir: Directory receiving the compiler probe outputs.
    """

    def __init__(self, host: HostSystem, platform: Platform, build_dir: str) -> None:
        self.host = host
        self.platform = platform
        self.build_dir = build_dir
        self._toolchains: dict[str, ToolchainInfo] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._toolchains

    def __iter__(self) -> Iterator[ToolchainInfo]:
        return iter(self._toolchains.values())

    def declare(
        self,
        name: str,
        family: Family | str,
        path: str | None = None,
        version: str | None = None,
        architecture: str | None = None,
    ) -> ToolchainInfo:
        """Declare the toolchain used for a role.

        When both ``version`` and ``architecture`` are given, the
        compiler is never run, which allows cross compilation.

        Args:
            name: Role name ("cc", "c++", "nvcc", ...).
            family: Compiler family, or a name it can be derived from.
            path: Executable, defaults to the family name.
            version: Dotted version number.
            architecture: Architecture name (see :func:`parse_architecture`).

        Raises:
            ToolchainError: On an unknown family, version or architecture.
        """
        if isinstance(family, str):
            resolved = family_from_name(family)
            if resolved is None:
                raise ToolchainError(f'unknown compiler type: "{family}"')
            family = resolved
        info = ToolchainInfo(
            name=name,
            family=family,
            path=path or ("cl" if family is Family.MSVC else family.value),
            language=language_of(name),
        )
        if version and architecture:
            digits = version_digits(version)
            if not digits:
                raise ToolchainError(f"cannot parse version '{version}'")
            info.version = encode_version(digits, family)
            info.architecture, info.nbits = parse_architecture(architecture)
            info.fully_resolved = True
        self._toolchains[name] = info
        logger.debug("Declared %s as %s (%s)", name, family.value, info.path)
        return info

    def declare_suite(self, suite: str) -> None:
        """Declare ``cc`` and ``c++`` from a compiler suite name.

        Raises:
            ToolchainError: If the suite is unknown.
        """
        try:
            c_exe, cpp_exe = SUITES[suite]
        except KeyError:
            raise ToolchainError(
                f'cannot get corresponding C++ compiler of "{suite}"'
            ) from None
        family = family_from_name(c_exe)
        if family is None:
            raise ToolchainError(f'cannot tell the family of "{c_exe}"')
        self.declare("cc", family, c_exe)
        self.declare("c++", family, cpp_exe)

    def cuda_host_name(self, nvcc: ToolchainInfo) -> str:
        """Role of the compiler nvcc hands host code to."""
        if nvcc.name == "c++" or CUDA_HOST_NAME in self._toolchains:
            return CUDA_HOST_NAME
        return "c++"

    def resolve(self, name: str) -> ToolchainInfo:
        """Return the fully resolved toolchain for a role.

        Raises:
            ToolchainError: If no compiler can be found, run or identified.
        """
        info = self._toolchains.get(name)
        if info is None:
            info = self._detect(name)
            self._toolchains[name] = info
        if not info.fully_resolved:
            self._probe(info)
            info.fully_resolved = True
            logger.info("Compiler: %s", info)
        return info

    # Detection

    def can_exec(self, command: str) -> bool:
        """Whether ``command`` runs and exits successfully."""
        try:
            _, code = self.host.run_process(command)
        except OSError:
            return False
        return code == 0

    def _detect(self, name: str) -> ToolchainInfo:
        role = "c++" if name == CUDA_HOST_NAME else name
        candidates = (
            _WINDOWS_CANDIDATES if self.platform.is_windows else _POSIX_CANDIDATES
        ).get(role)
        if candidates is None:
            family = family_from_name(name)
            if family is None:
                raise ToolchainError(f"unknown compiler '{name}'")
            return ToolchainInfo(
                name=name,
                family=family,
                path="cl" if family is Family.MSVC else name,
                language=language_of(name),
            )

        logger.info(
            "Automatic %s compiler detection", "C" if role == "cc" else "C++"
        )
        for exe, family in candidates:
            probe = exe if family is Family.MSVC else f"{exe} --version"
            if self.can_exec(probe):
                return ToolchainInfo(
                    name=name, family=family, path=exe, language=language_of(role)
                )
        raise ToolchainError("Cannot find a viable compiler")

    # Probing

    def _probe_command(self, info: ToolchainInfo) -> str:
        if info.family is Family.MSVC:
            return info.path
        if info.family is Family.GCC:
            return f"{info.path} --verbose"
        return f"{info.path} --version"

    def _probe_file(self, info: ToolchainInfo) -> str:
        return (
            f"{self.build_dir}/{COMPILER_INFOS_DIR}/"
            f"{info.path.replace('/', '.')}-version.txt"
        )

    def _probe(self, info: ToolchainInfo) -> None:
        command = self._probe_command(info)
        try:
            output, code = self.host.run_process(command)
        except OSError as e:
            raise ToolchainError(f'Command "{command}" fails: {e}') from e
        # Kept for inspection when detection goes wrong.
        self.host.write_text(self._probe_file(info), output)
        if code != 0:
            raise ToolchainError(
                f'Command "{stringify(command)}" fails with code {code}'
            )
        lines = output.splitlines()
        info.version = self._parse_version(info, lines)
        info.architecture, info.nbits = self._parse_architecture(info, lines)

    def _parse_version(self, info: ToolchainInfo, lines: list[str]) -> int:
        digits: list[str] = []
        for line in lines:
            if info.family is Family.NVCC:
                found = "release" in line
            else:
                found = (
                    "version" in line
                    or "Version" in line
                    or (info.family is Family.ICC and "icc (ICC) " in line)
                )
            if found:
                digits = version_digits(line)
        if len(digits) < 2:
            raise ToolchainError(f"Cannot determine compiler version of {info.path}")
        return encode_version(digits, info.family)

    def _parse_architecture(
        self, info: ToolchainInfo, lines: list[str]
    ) -> tuple[Architecture, int]:
        if info.family is Family.ICC:
            return Architecture.INTEL, 64
        if info.family is Family.NVCC:
            host = self.resolve(self.cuda_host_name(info))
            return host.architecture, host.nbits
        if info.family is Family.MSVC:
            words = lines[0].split() if lines else []
            arch = _MSVC_ARCH.get(words[-1].strip()) if words else None
            if arch is None:
                raise ToolchainError(
                    "Cannot determine compiler target architecture of "
                    + info.path
                )
            return arch

        result: tuple[Architecture, int] | None = None
        for line in lines:
            if not line.startswith(("Target:", "Cible :")):
                continue
            if "aarch64" in line:
                result = Architecture.AARCH64, 64
            elif "arm" in line:
                arch = Architecture.ARMHF if "hf" in line else Architecture.ARMEL
                result = arch, 32
            elif "x86_64" in line:
                result = Architecture.INTEL, 64
            elif "powerpc64le" in line:
                result = Architecture.PPC64EL, 64
            elif _I386_RE.search(line):
                result = Architecture.INTEL, 32
        if result is None:
            raise ToolchainError(
                f"Cannot determine compiler target architecture of {info.path}"
            )
        return result
