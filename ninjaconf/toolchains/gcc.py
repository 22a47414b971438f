# SPDX-License-Identifier: MIT
"""GCC, Clang and ARM Clang flag translation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ninjaconf.toolchains.common import (
    BaseFlagTranslator,
    cuda_arch_flags,
    sve_flags,
)
from ninjaconf.toolchains.toolchain import Architecture, Family, Language

if TYPE_CHECKING:
    from ninjaconf.core.tokenizer import Token

# Splitting 256-bit accesses only helps CPUs nobody targets any more.
_GCC_AVX_EXTRA = " -mno-avx256-split-unaligned-load -mno-avx256-split-unaligned-store"

CLANG_VEC_REPORT = (
    "-Rpass=loop-vectorize -Rpass-missed=loop-vectorize "
    "-Rpass-analysis=loop-vectorize"
)


def neon_flag(arch: Architecture) -> str:
    if arch is Architecture.ARMEL:
        return "-mfloat-abi=softfp -mfpu=neon"
    return "-mfpu=neon"


class GccClangTranslator(BaseFlagTranslator):
    """Flags for GCC and the Clang-based compilers."""

    @property
    def is_gcc(self) -> bool:
        return self.info.family is Family.GCC

    def flag_table(self) -> dict[str, str]:
        gcc = self.is_gcc
        version = self.info.version
        arch = self.info.architecture
        table = {
            "-std=c89": "-std=c89 -pedantic",
            "-std=c99": "-std=c99 -pedantic",
            "-std=c11": "-std=c11 -pedantic",
            "-std=c++98": "-std=c++98 -pedantic",
            "-std=c++03": "-std=c++03 -pedantic",
            "-std=c++11": (
                "-std=c++0x" if gcc and version < 40801 else "-std=c++11 -pedantic"
            ),
            "-std=c++14": (
                "-std=c++1y" if gcc and version < 50000 else "-std=c++14 -pedantic"
            ),
            "-std=c++17": "-std=c++17 -pedantic",
            "-std=c++20": "-std=c++20 -pedantic",
            "-Wall": (
                "-Wall -Wextra -Wconversion -Wsign-conversion"
                if gcc and version < 40500
                else "-Wall -Wextra -Wdouble-promotion -Wconversion -Wsign-conversion"
            ),
            "-static-libstdc++": "-static-libstdc++ -static-libgcc",
            "-msse41": "-msse4.1",
            "-msse42": "-msse4.2",
            "-mavx": "-mavx" + (_GCC_AVX_EXTRA if gcc else ""),
            "-mavx2": "-mavx2" + (_GCC_AVX_EXTRA if gcc else ""),
            "-mavx512_knl": "-mavx512f -mavx512pf -mavx512er -mavx512cd",
            "-mavx512_skylake": (
                "-mavx512f -mavx512dq -mavx512cd -mavx512bw -mavx512vl"
            ),
            "-mneon64": neon_flag(arch),
            "-mneon128": neon_flag(arch),
            "-maarch64": "",
            "-mvmx": "-mcpu=powerpc64le -maltivec",
            "-mvsx": "-mcpu=powerpc64le -mvsx",
            "-mwasm_simd128": "" if gcc else "-msimd128",
            "-mfma": "-mfma" if arch is Architecture.INTEL else "",
            "-mfp16": {
                Architecture.INTEL: "-mf16c",
                Architecture.AARCH64: "-mfp16-format=ieee -march=armv8.2-a+fp16",
            }.get(arch, ""),
            "-fno-omit-frame-pointer": (
                "-fno-omit-frame-pointer"
                if gcc
                else "-fno-omit-frame-pointer -mno-omit-leaf-frame-pointer"
            ),
        }
        for flag in (
            "-O0", "-O1", "-O2", "-O3", "-ffast-math", "-g", "-S", "-c", "-x",
            "-o", "-fPIC", "-msse", "-msse2", "-msse3", "-mssse3", "-fopenmp",
            "-shared", "-fdiagnostics-color=always", "--coverage",
        ):
            table[flag] = flag
        table.update(sve_flags(True))
        table.update(cuda_arch_flags("" if gcc else "--cuda-gpu-arch=sm_{}"))
        if gcc:
            table["-vec-report"] = (
                "-ftree-vectorizer-verbose=7"
                if version <= 40900
                else "-fopt-info-vec-all"
            )
        else:
            table["-vec-report"] = CLANG_VEC_REPORT
        return table

    def intercept(self, token: Token, ret: list[str]) -> bool:
        # libm is implied in C++, clang++ even warns about it
        if token.text == "-lm":
            if self.info.language is Language.C:
                ret.append("-lm")
            return True
        return False
