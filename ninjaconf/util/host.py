# SPDX-License-Identifier: MIT
"""Access to the host filesystem and processes.

The interpreter, the finders and the toolchain registry never touch the
filesystem or spawn processes directly; they go through a HostSystem so
that tests can substitute a fake one.
"""

from __future__ import annotations

import glob
import logging
import os
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class HostSystem:
    """Filesystem and process operations used while configuring."""

    def read_text(self, path: str) -> str:
        """Read a UTF-8 text file."""
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: str, text: str) -> None:
        """Write a text file, creating parent directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8", newline="\n")

    def glob(self, pattern: str) -> list[str]:
        """Return the paths matching a glob pattern, sorted."""
        return sorted(glob.glob(pattern))

    def run_process(self, command: str) -> tuple[str, int]:
        """Run a shell command, returning merged stdout/stderr and exit code.

        Raises:
            OSError: If the shell itself cannot be started.
        """
        logger.debug("Running: %s", command)
        result = subprocess.run(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
        return result.stdout, result.returncode

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_exe(self, path: str) -> bool:
        return os.path.isfile(path) and os.access(path, os.X_OK)

    def getenv(self, name: str) -> str | None:
        return os.environ.get(name)

    def path_dirs(self) -> list[str]:
        """Directories listed in PATH, in order."""
        value = os.environ.get("PATH", "")
        return [d for d in value.split(os.pathsep) if d]

    def realpath(self, path: str) -> str:
        return os.path.realpath(path)
