# SPDX-License-Identifier: MIT
"""Host platform detection and per-platform capabilities.

Everything that differs between hosts (file extensions for a compiler
family, the shell's command-line limit, rpath syntax, script flavor) is
looked up here from the Platform rather than branched on at call sites.
"""

from __future__ import annotations

import os
import platform as _platform
import sys
from dataclasses import dataclass
from functools import lru_cache

from ninjaconf.toolchains.toolchain import Family

# Documented cmd.exe limit.
WINDOWS_MAX_COMMAND_LENGTH = 8190


@dataclass(frozen=True)
class FileExtensions:
    """File extensions produced by a compiler family on a host.

    ``shared_link`` is the file given to the linker to link against a
    shared library (the import library on Windows).
    """

    asm: str
    obj: str
    static_lib: str
    shared_lib: str
    shared_link: str
    exe: str


_MSVC_EXTENSIONS = FileExtensions(".asm", ".obj", ".lib", ".dll", ".lib", ".exe")

_GNU_EXTENSIONS = {
    "linux": FileExtensions(".s", ".o", ".a", ".so", ".so", ""),
    "darwin": FileExtensions(".s", ".o", ".a", ".dylib", ".dylib", ""),
    "windows": FileExtensions(".s", ".o", ".a", ".dll", ".a", ".exe"),
}


@dataclass(frozen=True)
class Platform:
    """Description of the host running ninjaconf.

    Attributes:
        os: Operating system ('linux', 'darwin', 'windows', 'freebsd').
        arch: Machine architecture as reported by the host.
        is_64bit: Whether the host is 64-bit.
        page_size: Memory page size, used to derive the Linux argument
            limit.
        arg_max: ``sysconf(SC_ARG_MAX)`` when known, 0 otherwise.
    """

    os: str
    arch: str
    is_64bit: bool = True
    page_size: int = 4096
    arg_max: int = 0

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_macos(self) -> bool:
        return self.os == "darwin"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def is_bsd(self) -> bool:
        return self.os.endswith("bsd") or self.is_macos

    @property
    def is_posix(self) -> bool:
        return not self.is_windows

    @property
    def os_letter(self) -> str:
        """Letter used by ``[L]``/``[W]`` line prefixes for this host."""
        return "W" if self.is_windows else "L"

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.is_windows else ""

    @property
    def default_prefix(self) -> str:
        return "C:/Program Files" if self.is_windows else "/opt/local"

    @property
    def max_command_length(self) -> int:
        """Longest command line the host shell accepts."""
        if self.is_windows:
            return WINDOWS_MAX_COMMAND_LENGTH
        if self.is_macos and self.arg_max > 0:
            return self.arg_max - 1
        # Linux caps a single argument at 32 pages.
        return 32 * self.page_size - 1

    def command_length(self, commands: list[str]) -> int:
        """Length of the command line running ``commands`` in sequence.

        Accounts for the separators and wrappers added when joining.
        """
        if self.is_windows:
            return sum(len(c) + 8 for c in commands) + 9
        return sum(len(c) + 4 for c in commands)

    def extensions(self, family: Family) -> FileExtensions:
        """File extensions produced by ``family`` on this host."""
        # nvcc drives cl.exe on Windows
        if family is Family.MSVC or (family is Family.NVCC and self.is_windows):
            return _MSVC_EXTENSIONS
        return _GNU_EXTENSIONS.get(self.os, _GNU_EXTENSIONS["linux"])

    def rpath_argument(self, directory: str) -> str:
        """Linker rpath option for ``directory``, relative to $ORIGIN."""
        sep = "," if self.is_bsd else "="
        if directory == ".":
            return f"-rpath{sep}$ORIGIN"
        if directory.startswith("./"):
            return f"-rpath{sep}$ORIGIN{directory[2:]}"
        return f"-rpath{sep}{directory}"


def _detect_os() -> str:
    if sys.platform.startswith("win") or sys.platform == "cygwin":
        return "windows"
    if sys.platform == "darwin":
        return "darwin"
    if sys.platform.startswith("linux"):
        return "linux"
    # freebsd14 -> freebsd
    return sys.platform.rstrip("0123456789")


def _sysconf(name: str) -> int:
    try:
        return int(os.sysconf(name))
    except (AttributeError, ValueError, OSError):
        return 0


@lru_cache(maxsize=1)
def get_platform() -> Platform:
    """Detect the host platform (cached)."""
    page_size = _sysconf("SC_PAGESIZE") or 4096
    return Platform(
        os=_detect_os(),
        arch=_platform.machine().lower(),
        is_64bit=sys.maxsize > 2**32,
        page_size=page_size,
        arg_max=_sysconf("SC_ARG_MAX"),
    )
