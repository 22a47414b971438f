# SPDX-License-Identifier: MIT
"""Microsoft Visual C++ (cl.exe) flag translation.

cl.exe differs from GCC-like compilers in two ways that matter here:

- ``-c``/``-S`` do not redirect the single ``-o`` output; each kind of
  output has its own option (``/Fo`` objects, ``/Fe`` executables,
  ``/Fa`` assembly, ``/Fd`` debug database).
- cl.exe always leaves object and debug files behind, named after the
  source file. Two compilations of one source with different flags would
  race on them, so they go into a per-output side directory.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ninjaconf.core.errors import ParseError
from ninjaconf.core.tokenizer import Action
from ninjaconf.shell.commands import stringify
from ninjaconf.toolchains.common import (
    STD_FLAGS,
    BaseFlagTranslator,
    cuda_arch_flags,
    sve_flags,
    uniq,
)
from ninjaconf.toolchains.toolchain import Architecture

if TYPE_CHECKING:
    from ninjaconf.core.tokenizer import Token

SIDE_FILES_DIR = "cl.exe-side-files\\"

# Always first, the autodeps flag is inserted right after them.
BASE_COMMAND = ("cl", "/nologo", "/EHsc", "/D_CRT_SECURE_NO_WARNINGS")


class StopStage(enum.Enum):
    ASSEMBLE = "assemble"
    COMPILE = "compile"
    LINK = "link"


class MsvcTranslator(BaseFlagTranslator):
    """Flags for cl.exe."""

    def flag_table(self) -> dict[str, str]:
        version = self.info.version
        nbits = self.info.nbits
        table = dict.fromkeys(STD_FLAGS, "")
        if version >= 1911:
            table["-std=c++14"] = "/std:c++14"
            table["-std=c++17"] = "/std:c++17"
            table["-std=c++20"] = "/std:c++latest"
        elif version >= 1900:
            table["-std=c++14"] = "/std:c++14"
            table["-std=c++17"] = "/std:c++latest"
            table["-std=c++20"] = "/std:c++latest"
        if version > 1900:
            # __cplusplus is stuck at 199711L without it
            for flag in STD_FLAGS:
                if flag.startswith("-std=c++"):
                    table[flag] = (table[flag] + " /Zc:__cplusplus").lstrip()
        table.update(
            {
                "-O0": "/Od",
                "-O1": "/O2",
                "-O2": "/Ox",
                "-O3": "/Ox",
                "-g": "/Zi",
                "-S": "/FA",
                "-c": "/c",
                "-o": "",
                "-Wall": "/W3",
                "-fPIC": "",
                "-static-libstdc++": "/MT",
                "-msse": "/arch:SSE" if nbits == 32 else "",
                "-msse2": "/arch:SSE2" if nbits == 32 else "",
                "-msse3": "",
                "-mssse3": "",
                "-msse41": "",
                "-msse42": "",
                "-mavx": "/arch:AVX",
                "-mavx2": "/arch:AVX2",
                "-mavx512_knl": "/arch:AVX512",
                "-mavx512_skylake": "/arch:AVX512",
                "-mfma": (
                    "/arch:VFPv4"
                    if self.info.architecture is Architecture.ARMEL
                    else ""
                ),
                "-mneon64": "",
                "-mneon128": "",
                "-maarch64": "",
                "-mfp16": "",
                "-fopenmp": "/openmp",
                "-shared": "/LD",
                "-fdiagnostics-color=always": "",
                "--coverage": "",
                "-mvmx": "",
                "-mvsx": "",
                "-mwasm_simd128": "",
                "-vec-report": "/Qvec-report:2" if version >= 1800 else "",
                # /Oy- only exists for 32-bit targets
                "-fno-omit-frame-pointer": "/Oy-" if nbits == 32 else "",
            }
        )
        table.update(sve_flags(False))
        table.update(cuda_arch_flags(""))
        return table

    def version_command(self) -> list[str]:
        # cl prints its banner when run without arguments
        return ["cl"]

    def translate(self, tokens: Sequence[Token]) -> list[str]:
        table = self.flag_table()
        ify = self.shell.ify
        ret = list(BASE_COMMAND)
        linker_args: list[str] = []
        stage = StopStage.LINK
        debug_info = False
        fast_math = False
        output = ""

        i = 1
        while i < len(tokens):
            token = tokens[i]
            arg = token.text
            i += 1
            if arg == "--version":
                return self.version_command()
            if arg == "-lpthread":
                ret.append("/MT")
                continue
            if arg in ("-lm", "-L."):
                continue
            if arg == "-ffast-math":
                fast_math = True
                continue
            if not arg.startswith("-"):
                ret.append(ify(arg))
                continue

            option = arg[1:2]
            if option in ("I", "l", "L") and len(arg) == 2:
                raise ParseError("no file/directory given here", token.location)
            if option == "D" and len(arg) == 2:
                raise ParseError("no macro name given here", token.location)
            if arg == "-l:":
                raise ParseError("no file given here", token.location)

            if option == "I":
                ret.append("/I" + ify(arg[2:]))
            elif option == "D":
                ret.append("/D" + stringify(arg[2:]))
            elif option == "L":
                linker_args.append("/LIBPATH:" + ify(arg[2:]))
            elif arg.startswith("-l:"):
                ret.append(ify(arg[3:]))
            elif option == "l":
                ret.append(ify(f"lib{arg[2:]}.lib"))
            elif arg == "-o":
                if i >= len(tokens):
                    raise ParseError("no filename given after -o", token.location)
                output = tokens[i].text
                i += 1
            elif arg == "-x":
                if i >= len(tokens):
                    raise ParseError("no language given after", token.location)
                language = tokens[i].text
                i += 1
                if language == "c":
                    ret.append("/TC")
                elif language == "c++":
                    ret.append("/TP")
            elif arg in table:
                if arg == "-c":
                    stage = StopStage.COMPILE
                elif arg == "-S":
                    stage = StopStage.ASSEMBLE
                elif arg == "-g":
                    debug_info = True
                ret.extend(self.translate_arg(token, table))
            elif self.action is Action.PERMISSIVE:
                ret.append(arg)
            else:
                raise ParseError("unknown compiler option", token.location)

        side_dir = SIDE_FILES_DIR
        if output:
            side_dir += ify(self.shell.sanitize(output) + "-side-files\\")
            if stage is StopStage.ASSEMBLE:
                ret.extend(["/Fa" + ify(output), "/Fe" + side_dir, "/Fo" + side_dir])
            elif stage is StopStage.COMPILE:
                ret.append("/Fo" + ify(output))
            else:
                ret.extend(["/Fe" + ify(output), "/Fo" + side_dir])
        if debug_info:
            ret.append("/Fd" + side_dir)
        ret.append("/fp:fast" if fast_math else "/fp:strict")
        ret.extend(["/link", "/INCREMENTAL:NO"])
        ret.extend(linker_args)

        if debug_info or stage is not StopStage.ASSEMBLE:
            ret[0] = f"cmd /c ( if not exist {side_dir} md {side_dir} ) & cl"
        return uniq(ret)
