# SPDX-License-Identifier: MIT
"""Host shell command builders.

Shell knows how to quote paths and how to spell common file operations
for the host: POSIX utilities on Linux and macOS, cmd.exe builtins on
Windows. It also translates the built-in verbs of command lines
(``touch``, ``cd``, ``rm``, ``cp``, ``mkdir``, ``cat``, ``echo``, ``mv``,
``ar``).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from ninjaconf.core.errors import ParseError

if TYPE_CHECKING:
    from ninjaconf.configure.platform import Platform
    from ninjaconf.core.tokenizer import Token


def stringify(text: str) -> str:
    """Quote ``text`` when it contains a blank."""
    if " " in text or "\t" in text:
        return f'"{text}"'
    return text


class Shell:
    """Command spelling for one host platform."""

    def __init__(self, platform: Platform) -> None:
        self.platform = platform
        self.windows = platform.is_windows
        self._verbs: dict[str, Callable[[Sequence[Token]], str]] = {
            "touch": self._touch,
            "cd": self._cd,
            "rm": self._rm,
            "cp": self._cp,
            "mkdir": self._mkdir,
            "cat": self._cat,
            "echo": self._echo,
            "mv": self._mv,
            "ar": self._ar,
        }

    # Quoting

    def sanitize(self, path: str) -> str:
        """Use the host's path separator."""
        if self.windows:
            return path.replace("/", "\\")
        return path

    def ify(self, path: str) -> str:
        """Sanitize and quote a path."""
        return stringify(self.sanitize(path))

    def _filenames(self, tokens: Sequence[Token], start: int) -> str:
        return "".join(" " + self.ify(t.text) for t in tokens[start:])

    # Commands used by synthesized rules

    def rm(self, path: str, recursive: bool = False) -> str:
        if self.windows:
            flags = "/S /Q" if recursive else "/F /Q"
            return f"del {flags} {self.ify(path)}"
        flags = "-rf" if recursive else "-f"
        return f"rm {flags} {stringify(path)}"

    def cp(self, src: str, dst: str, recursive: bool = False) -> str:
        if self.windows:
            if recursive:
                return f"xcopy {self._xcopy_paths(src, dst)} /E /C /I /Q /G /H /R /Y"
            return f"xcopy {self.ify(src)} {self.ify(dst)} /C /I /Q /G /H /Y"
        flags = "-rf" if recursive else "-f"
        return f"cp {flags} {stringify(src)} {stringify(dst)}"

    def _xcopy_paths(self, src: str, dst: str) -> str:
        # xcopy copies the content of a directory, not the directory itself
        cut = max(src.rfind("/"), src.rfind("\\"))
        base = src[cut + 1 :]
        return stringify(src) + " " + stringify(dst + "\\" + base)

    def mkdir_p(self, path: str) -> str:
        quoted = stringify(path)
        if self.windows:
            return f"if not exist {quoted} md {quoted}"
        return f"mkdir -p {quoted}"

    def zip_dir(self, dirname: str) -> str:
        """Archive a directory into ``dirname.zip`` or ``dirname.tar.bz2``."""
        if self.windows:
            return (
                "powershell -Command Compress-Archive -Force -Path "
                f"{self.ify(dirname)} -DestinationPath {self.ify(dirname + '.zip')}"
            )
        return f"tar -cvjSf {stringify(dirname + '.tar.bz2')} {stringify(dirname)}"

    @property
    def archive_suffix(self) -> str:
        return ".zip" if self.windows else ".tar.bz2"

    def raw(self, tokens: Sequence[Token]) -> str:
        """Reassemble tokens verbatim, quoting where needed."""
        return " ".join(self.sanitize(stringify(t.text)) for t in tokens)

    # Built-in verbs

    def has_verb(self, name: str) -> bool:
        return name in self._verbs

    def verb(self, tokens: Sequence[Token]) -> str:
        """Translate a command line whose head is a built-in verb."""
        return self._verbs[tokens[0].text](tokens)

    def _touch(self, tokens: Sequence[Token]) -> str:
        if len(tokens) != 2:
            raise ParseError("touch must have only one argument", tokens[0].location)
        if self.windows:
            return "echo >" + self.ify(tokens[1].text)
        return "touch " + stringify(tokens[1].text)

    def _cd(self, tokens: Sequence[Token]) -> str:
        if len(tokens) != 2:
            raise ParseError("cd must have only one directory", tokens[0].location)
        return "cd " + self.ify(tokens[1].text)

    def _rm(self, tokens: Sequence[Token]) -> str:
        if len(tokens) == 1:
            raise ParseError(
                "expected at least one file to delete", tokens[0].location
            )
        if tokens[1].text == "-r":
            head = "rd /S /Q" if self.windows else "rm -rf"
            return head + self._filenames(tokens, 2)
        head = "del /F /Q" if self.windows else "rm -f"
        return head + self._filenames(tokens, 1)

    def _cp(self, tokens: Sequence[Token]) -> str:
        recursive = len(tokens) > 1 and tokens[1].text == "-r"
        expected = 4 if recursive else 3
        if len(tokens) != expected:
            raise ParseError(
                "expected exactly one source and one destination",
                tokens[0].location,
            )
        if recursive:
            if self.windows:
                return self.cp(tokens[2].text, tokens[3].text, recursive=True)
            return "cp -rf" + self._filenames(tokens, 2)
        if self.windows:
            return "xcopy" + self._filenames(tokens, 1) + " /C /I /Q /G /H /Y"
        return "cp -f" + self._filenames(tokens, 1)

    def _mkdir(self, tokens: Sequence[Token]) -> str:
        if len(tokens) == 1:
            raise ParseError(
                "expected one folder to create after", tokens[0].location
            )
        if len(tokens) > 2:
            raise ParseError(
                "can only deal with one folder at a time", tokens[2].location
            )
        folder = self.ify(tokens[1].text)
        if self.windows:
            return f"if not exist {folder} md {folder}"
        return f"mkdir -p {folder}"

    def _cat(self, tokens: Sequence[Token]) -> str:
        if len(tokens) == 1:
            raise ParseError("expected at least one file to dump", tokens[0].location)
        return ("type" if self.windows else "cat") + self._filenames(tokens, 1)

    def _echo(self, tokens: Sequence[Token]) -> str:
        if self.windows and len(tokens) == 1:
            return "echo."
        return "echo" + self._filenames(tokens, 1)

    def _mv(self, tokens: Sequence[Token]) -> str:
        if len(tokens) != 3:
            raise ParseError("mv must have only two arguments", tokens[0].location)
        return ("move /Y" if self.windows else "mv") + self._filenames(tokens, 1)

    def _ar(self, tokens: Sequence[Token]) -> str:
        if len(tokens) < 4:
            raise ParseError("ar must have at least two arguments", tokens[0].location)
        if tokens[1].text != "rcs":
            raise ParseError("only accepted argument is 'rcs'", tokens[1].location)
        if self.windows:
            return "lib /nologo /out:" + tokens[2].text + self._filenames(tokens, 3)
        return "ar rcs" + self._filenames(tokens, 2)
