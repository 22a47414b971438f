# SPDX-License-Identifier: MIT
"""HIP (hipcc, hcc) and DPC++ flag translation.

These compilers are Clang underneath but target accelerators, so host
SIMD flags have no meaning for them.
"""

from __future__ import annotations

from ninjaconf.toolchains.common import (
    STD_FLAGS,
    BaseFlagTranslator,
    cuda_arch_flags,
    sve_flags,
)
from ninjaconf.toolchains.gcc import CLANG_VEC_REPORT

_HOST_SIMD_FLAGS = (
    "-msse", "-msse2", "-msse3", "-mssse3", "-msse41", "-msse42", "-mavx",
    "-mavx2", "-mavx512_knl", "-mavx512_skylake", "-mneon64", "-mneon128",
    "-maarch64", "-mvmx", "-mvsx", "-mwasm_simd128", "-mfma", "-mfp16",
)


class HipTranslator(BaseFlagTranslator):
    """Flags for hipcc, hcc and dpcpp."""

    def flag_table(self) -> dict[str, str]:
        table = {flag: f"{flag} -pedantic" for flag in STD_FLAGS}
        for flag in (
            "-O0", "-O1", "-O2", "-O3", "-ffast-math", "-g", "-S", "-c", "-o",
            "-x", "-fPIC", "-fopenmp", "-shared", "-fdiagnostics-color=always",
            "--coverage",
        ):
            table[flag] = flag
        table.update(dict.fromkeys(_HOST_SIMD_FLAGS, ""))
        table.update(sve_flags(False))
        table.update(cuda_arch_flags("--cuda-gpu-arch=sm_{}"))
        table["-Wall"] = (
            "-Wall -Wextra -Wdouble-promotion -Wconversion -Wsign-conversion"
        )
        table["-static-libstdc++"] = "-static-libstdc++ -static-libgcc"
        table["-fno-omit-frame-pointer"] = (
            "-fno-omit-frame-pointer -mno-omit-leaf-frame-pointer"
        )
        table["-vec-report"] = CLANG_VEC_REPORT
        return table
