# SPDX-License-Identifier: MIT
"""NVIDIA CUDA compiler (nvcc) flag translation.

nvcc understands few options itself. Everything it does not know is
translated for the host compiler and handed over through a single
``-Xcompiler`` argument. nvcc reorders arguments before calling the host
compiler, so their relative order is not preserved.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from ninjaconf.core.errors import ParseError
from ninjaconf.toolchains.common import CUDA_ARCHS, BaseFlagTranslator, lib_basename

if TYPE_CHECKING:
    from ninjaconf.core.tokenizer import Action, Token
    from ninjaconf.shell.commands import Shell
    from ninjaconf.toolchains.toolchain import ToolchainInfo

HostTranslate = Callable[[list["Token"]], list[str]]

# Position of the -x option, right after -ccbin.
_X_OPTION_INDEX = 2

_CPP_SUFFIXES = (".cc", ".cpp", ".cxx")


class NvccTranslator(BaseFlagTranslator):
    """Flags for nvcc.

    Args:
        info: The nvcc toolchain.
        shell: Host shell.
        action: Translation mode.
        host_info: Toolchain nvcc drives for host code.
        host_translate: Translates a token list for ``host_info``,
            without header dependency flags.
    """

    def __init__(
        self,
        info: ToolchainInfo,
        shell: Shell,
        action: Action,
        host_info: ToolchainInfo,
        host_translate: HostTranslate,
    ) -> None:
        super().__init__(info, shell, action)
        self.host_info = host_info
        self.host_translate = host_translate

    def flag_table(self) -> dict[str, str]:
        table = {f"-msm_{sm}": f"-arch=sm_{sm}" for sm in CUDA_ARCHS}
        table.update(
            {
                "-c": "-c",
                "-o": "-o",
                "-shared": "-shared",
                "-S": "--ptx",
                "-g": "-g -G -lineinfo",
            }
        )
        return table

    def rpath(self, directory: str) -> str:
        if not self.host_info.family.has_rpath:
            return ""
        return self.shell.platform.rpath_argument(directory)

    def translate(self, tokens: Sequence[Token]) -> list[str]:
        table = self.flag_table()
        ify = self.shell.ify
        ret = [
            self.executable,
            "-ccbin " + self.host_info.path,
            f"-m{self.info.nbits}",
        ]
        host_tokens: list[Token] = [tokens[0]]
        language = ""
        only_cpp_inputs = True
        next_is_output = False

        i = 1
        while i < len(tokens):
            token = tokens[i]
            arg = token.text
            i += 1
            if arg == "--version":
                return self.version_command()
            if arg == "-x":
                if i >= len(tokens):
                    raise ParseError("no language given after", token.location)
                language = tokens[i].text
                i += 1
                continue
            if arg in table:
                if arg == "-o":
                    next_is_output = True
                ret.append(table[arg])
                continue
            if arg in ("-lm", "-lpthread"):
                host_tokens.append(token)
                continue
            if arg.startswith("-std=c++") and arg != "-std=c++98":
                ret.append("-std c++" + arg[8:])
                host_tokens.append(token)
                continue
            if arg == "-ffast-math":
                ret.append("--use_fast_math")
                host_tokens.append(token)
                continue

            if not arg.startswith("-"):
                # nvcc assumes C++ files carry no device code, unlike the
                # other offloading compilers
                if not next_is_output and not arg.lower().endswith(_CPP_SUFFIXES):
                    only_cpp_inputs = False
                ret.append(ify(arg))
                next_is_output = False
                continue

            option = arg[1:2]
            if arg.startswith("-l:"):
                if len(arg) == 3:
                    raise ParseError("no file/directory given here", token.location)
                ret.append("-l:" + ify(arg[3:]))
            elif option in ("I", "L", "l"):
                if len(arg) == 2:
                    raise ParseError("no file/directory given here", token.location)
                if option == "l":
                    ret.append("-l" + ify(lib_basename(arg[2:], self.shell.windows)))
                elif option == "L":
                    path = ify(arg[2:])
                    ret.append("-L" + path)
                    rpath = self.rpath(path)
                    if rpath:
                        ret.append(f"-Xlinker '{rpath}'")
                else:
                    ret.append("-I" + ify(arg[2:]))
            elif option == "D":
                if len(arg) == 2:
                    raise ParseError("no macro name given here", token.location)
                host_tokens.append(token)
                ret.append(arg)
            else:
                host_tokens.append(token)

        if language:
            ret.insert(_X_OPTION_INDEX, "-x " + language)
        elif only_cpp_inputs:
            ret.insert(_X_OPTION_INDEX, "-x cu")

        # The first word is the host executable. nvcc emits non standard
        # code for the host compiler, so -pedantic only produces noise.
        host_words = [
            word.replace(" -pedantic", "")
            for word in self.host_translate(host_tokens)[1:]
        ]
        host_words = [word for word in host_words if word]
        if host_words:
            ret.append(
                "-Xcompiler "
                + ",".join(f'"{w}"' if " " in w else w for w in host_words)
            )
        return ret
