# SPDX-License-Identifier: MIT
"""Intel C/C++ compiler (icc) flag translation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ninjaconf.toolchains.common import (
    STD_FLAGS,
    BaseFlagTranslator,
    cuda_arch_flags,
    sve_flags,
)

if TYPE_CHECKING:
    from ninjaconf.core.tokenizer import Token


class IccTranslator(BaseFlagTranslator):
    """Flags for icc.

    icc relaxes floating point semantics by default, so strict semantics
    are requested unless -ffast-math is given.
    """

    fast_math = False

    def flag_table(self) -> dict[str, str]:
        table = {flag: f"{flag} -pedantic" for flag in STD_FLAGS}
        table["-std=c++03"] = ""
        for flag in (
            "-O0", "-O1", "-O2", "-O3", "-g", "-S", "-c", "-o", "-x", "-fPIC",
            "-msse", "-msse2", "-msse3", "-mssse3", "-mavx", "-mavx2", "-mfma",
            "-fopenmp", "-shared",
        ):
            table[flag] = flag
        table.update(
            {
                # no -Wdouble-promotion in icc
                "-Wall": "-Wall -Wextra -Wconversion -Wsign-conversion",
                "-static-libstdc++": "-static-libstdc++ -static-libgcc",
                "-msse41": "-msse4.1",
                "-msse42": "-msse4.2",
                "-mavx512_knl": "-mavx512f -mavx512pf -mavx512er -mavx512cd",
                "-mavx512_skylake": (
                    "-mavx512f -mavx512dq -mavx512cd -mavx512bw -mavx512vl "
                    "-march=skylake-avx512"
                ),
                "-mfp16": "-mf16c",
                "-mneon64": "",
                "-mneon128": "",
                "-maarch64": "",
                "-mvmx": "",
                "-mvsx": "",
                "-mwasm_simd128": "",
                "-fdiagnostics-color=always": "",
                "--coverage": "-prof-gen=srcpos",
                "-fno-omit-frame-pointer": (
                    "-fno-omit-frame-pointer -mno-omit-leaf-frame-pointer"
                ),
                "-vec-report": (
                    "-qopt-report -qopt-report-phase=vec -qopt-report-file=stdout"
                ),
            }
        )
        table.update(sve_flags(False))
        table.update(cuda_arch_flags(""))
        return table

    def intercept(self, token: Token, ret: list[str]) -> bool:
        if token.text == "-ffast-math":
            self.fast_math = True
            return True
        return False

    def finish(self, ret: list[str]) -> None:
        if not self.fast_math:
            ret.append("-fp-model strict")
