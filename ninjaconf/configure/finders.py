# SPDX-License-Identifier: MIT
"""Program, header and library lookup.

Each finder searches a list of directories, defines a family of
variables describing what it found (empty values when nothing was found)
and fails only when the lookup is required. Variables defined here are
considered used: they describe the host, and a description is not
expected to consume every one of them.
"""

from __future__ import annotations

import enum
import logging
import posixpath
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ninjaconf.core.errors import ToolNotFoundError
from ninjaconf.core.rules import RuleBuilder, RuleKind
from ninjaconf.toolchains.common import lib_basename
from ninjaconf.toolchains.toolchain import Family

if TYPE_CHECKING:
    from ninjaconf.configure.platform import Platform
    from ninjaconf.core.variables import VariableStore
    from ninjaconf.shell.commands import Shell
    from ninjaconf.util.host import HostSystem
    from ninjaconf.util.source_location import SourceLocation

logger = logging.getLogger(__name__)

_NOT_IDENTIFIER_RE = re.compile(r"[^A-Z0-9_]")

_LIB_VARIABLES = (".header_dir", ".lib_dir", ".flags", ".cflags", ".ldflags", ".deps")


class LibType(enum.Enum):
    """Which kind of library binary find_lib accepts."""

    AUTOMATIC = "automatic"
    DYNAMIC = "dynamic"
    STATIC = "static"


@dataclass
class Finder:
    """Lookup helpers bound to a host.

    Attributes:
        host: Filesystem access.
        platform: Host platform, for executable and library names.
        shell: Command spelling, for the copy rule of imported libraries.
        variables: Store receiving the result variables.
    """

    host: HostSystem
    platform: Platform
    shell: Shell
    variables: VariableStore

    def _set(self, name: str, value: str) -> None:
        self.variables.add(name, value, used=True)

    def _search(self, paths: list[str], files: list[str]) -> tuple[str, str] | None:
        for directory in paths:
            for name in files:
                if self.host.exists(join_path(directory, name)):
                    return directory, name
        return None

    def find_exe(
        self,
        var: str,
        program: str,
        paths: list[str],
        *,
        required: bool = True,
        location: SourceLocation | None = None,
    ) -> bool:
        """Look for ``program`` in ``paths``, then in PATH.

        Defines ``var`` (full path) and ``var.dir``.

        Raises:
            ToolNotFoundError: If required and not found.
        """
        exe = program + self.platform.exe_suffix
        found = self._search(paths, [exe])
        if found is None:
            found = self._search(self.host.path_dirs(), [exe])
        if found is None:
            logger.info("Program '%s' not found", program)
            if required:
                raise ToolNotFoundError("Program", program, location)
            self._set(f"{var}.dir", "")
            self._set(var, "")
            return False
        logger.info("Program '%s' found", program)
        logger.debug("Program '%s' found in '%s'", program, found[0])
        self._set(f"{var}.dir", found[0])
        self._set(var, join_path(*found))
        return True

    def find_header(
        self,
        var: str,
        header: str,
        paths: list[str],
        *,
        required: bool = True,
        location: SourceLocation | None = None,
    ) -> bool:
        """Look for ``header`` (possibly with subdirectories) in ``paths``.

        Defines ``var.dir``, and ``var.flags``/``var.cflags`` holding
        ``-DHAS_<HEADER> -I<dir>``.

        Raises:
            ToolNotFoundError: If required and not found.
        """
        found = self._search(paths, [header])
        if found is None:
            logger.info("Header '%s' not found", header)
            if required:
                raise ToolNotFoundError("Header", header, location)
            for suffix in (".dir", ".flags", ".cflags"):
                self._set(var + suffix, "")
            return False
        logger.info("Header '%s' found", header)
        logger.debug("Header '%s' found in '%s'", header, found[0])
        flags = f"-DHAS_{define_name(header)} -I{found[0]}"
        self._set(f"{var}.dir", found[0])
        self._set(f"{var}.flags", flags)
        self._set(f"{var}.cflags", flags)
        return True

    def library_candidates(self, name: str, libtype: LibType) -> list[str]:
        """File names accepted for library ``name``, in preference order."""
        if self.platform.is_windows:
            return [f"{name}.lib", f"lib{name}.lib", f"{name}.a", f"lib{name}.a"]
        shared = f"lib{name}{self.platform.extensions(Family.GCC).shared_lib}"
        static = f"lib{name}.a"
        if libtype is LibType.DYNAMIC:
            return [shared]
        if libtype is LibType.STATIC:
            return [static]
        return [shared, static]

    def find_lib(
        self,
        var: str,
        header: str,
        binary: str,
        paths: list[str],
        *,
        libtype: LibType = LibType.AUTOMATIC,
        required: bool = True,
        import_lib: bool = False,
        location: SourceLocation | None = None,
    ) -> RuleBuilder | None:
        """Look for a library header and binary.

        The header is searched in ``paths`` and their ``include``
        subdirectories, the binary in ``paths`` and their ``lib`` and
        ``lib64`` subdirectories. Defines ``var.header_dir``,
        ``var.lib_dir``, ``var.deps``, ``var.flags``, ``var.cflags`` and
        ``var.ldflags``.

        With ``import_lib``, the binary is copied next to the build file
        by a rule, which is returned for the caller to register; the
        flags then point at the copy.

        Raises:
            ToolNotFoundError: If required and not found.
        """
        lib_name = lib_basename(posixpath.basename(binary), self.platform.is_windows)
        header_paths = paths + [join_path(p, "include") for p in paths]
        lib_paths = list(paths)
        for p in paths:
            lib_paths += [join_path(p, "lib"), join_path(p, "lib64")]
        header_found = self._search(header_paths, [header])
        candidates = self.library_candidates(lib_name, libtype)
        binary_found = self._search(lib_paths, candidates)

        if header_found is None or binary_found is None:
            logger.info("Library '%s' not found", lib_name)
            if required:
                raise ToolNotFoundError("Library", lib_name, location)
            for suffix in _LIB_VARIABLES:
                self._set(var + suffix, "")
            return None

        logger.info("Library '%s' found", lib_name)
        logger.debug(
            "Library '%s' found, header in '%s' and binary in '%s'",
            lib_name,
            header_found[0],
            binary_found[0],
        )
        lib_dir, lib_file = binary_found
        lib_path = join_path(lib_dir, lib_file)
        if lib_file.lower().startswith("lib"):
            link = f" -l{lib_name}"
        else:
            link = f" -l:{lib_file}"
        cflags = f"-DHAS_{define_name(lib_name)} -I{header_found[0]}"
        self._set(f"{var}.header_dir", header_found[0])

        rule = None
        if import_lib:
            logger.info("Importing library: %s", lib_path)
            ldflags = "-L." + link
            self._set(f"{var}.lib_dir", ".")
            self._set(f"{var}.deps", lib_file)
            rule = RuleBuilder(
                kind=RuleKind.SINGLE_FILE,
                output=lib_file,
                location=location,
                dependencies=[lib_path],
                commands=[self.shell.cp(lib_path, lib_file)],
            )
            root, ext = posixpath.splitext(lib_path)
            if ext.lower() == ".dll":
                # the import library goes with the dll
                import_lib_file = posixpath.splitext(lib_file)[0] + ".lib"
                rule.commands.append(self.shell.cp(root + ".lib", import_lib_file))
        else:
            ldflags = f"-L{lib_dir}" + link
            self._set(f"{var}.lib_dir", lib_dir)
            self._set(f"{var}.deps", lib_path)

        self._set(f"{var}.flags", f"{cflags} {ldflags}")
        self._set(f"{var}.cflags", cflags)
        self._set(f"{var}.ldflags", ldflags)
        return rule


def join_path(directory: str, name: str) -> str:
    """Join with '/', leaving ``name`` alone when ``directory`` is empty."""
    if not directory:
        return name
    if not name:
        return directory
    return f"{directory}/{name}"


def define_name(text: str) -> str:
    """Turn a file name into a macro name suffix.

    >>> define_name("sys/mman.h")
    'SYS_MMAN_H'
    """
    return _NOT_IDENTIFIER_RE.sub("_", text.upper())
