# SPDX-License-Identifier: MIT
"""Statement keywords of the description language."""

from __future__ import annotations

import enum


class Statement(enum.Enum):
    """One member per statement keyword."""

    DISABLE_ALL = "disable_all"
    DISABLE_UPDATE = "disable_update"
    DISABLE_CLEAN = "disable_clean"
    DISABLE_INSTALL = "disable_install"
    DISABLE_PACKAGE = "disable_package"
    SET = "set"
    IFNOT_SET = "ifnot_set"
    GLOB = "glob"
    POPEN = "popen"
    IFNOT_GLOB = "ifnot_glob"
    GETENV = "getenv"
    BUILD_FILE = "build_file"
    PHONY = "phony"
    BUILD_FILES = "build_files"
    FIND_EXE = "find_exe"
    FIND_LIB = "find_lib"
    FIND_HEADER = "find_header"
    ECHO = "echo"
    INCLUDE = "include"
    INSTALL_DIR = "install_dir"
    INSTALL_FILE = "install_file"
    PACKAGE_NAME = "package_name"
    BEGIN_TRANSLATE_IF = "begin_translate_if"
    END_TRANSLATE = "end_translate"


KEYWORDS: tuple[str, ...] = tuple(s.value for s in Statement)

# Values of `set` that are replaced by a computed value.
CONSTANTS: tuple[str, ...] = (
    "@source_dir",
    "@build_dir",
    "@obj_ext",
    "@asm_ext",
    "@static_lib_ext",
    "@shared_lib_ext",
    "@shared_link_ext",
    "@exe_ext",
    "@in",
    "@item",
    "@out",
    "@make_command",
    "@prefix",
    "@ccomp_suite",
    "@ccomp_path",
    "@cppcomp_suite",
    "@cppcomp_path",
)


def classify(head: str) -> Statement | None:
    """Return the statement named by ``head``, None if it names none."""
    try:
        return Statement(head)
    except ValueError:
        return None
