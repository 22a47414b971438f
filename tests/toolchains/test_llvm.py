# SPDX-License-Identifier: MIT
"""Tests for ninjaconf.toolchains.llvm."""

import pytest

from ninjaconf.toolchains.toolchain import Family


@pytest.fixture(params=[Family.HIPCC, Family.HCC, Family.DPCPP])
def accelerator(request, compile_line):
    family = request.param

    def run(text):
        return compile_line(text, family=family, path=family.value)

    run.path = family.value
    return run


class TestHip:
    def test_host_simd_dropped(self, accelerator):
        assert accelerator("cc -mavx2 -mfma -O3 a.cpp") == (
            f"{accelerator.path} -O3 a.cpp"
        )

    def test_sve_dropped(self, accelerator):
        assert accelerator("cc -msve -c a.cpp") == f"{accelerator.path} -c a.cpp"

    def test_gpu_arch(self, accelerator):
        assert accelerator("cc -msm_70") == (
            f"{accelerator.path} --cuda-gpu-arch=sm_70"
        )

    def test_std_is_pedantic(self, accelerator):
        assert accelerator("cc -std=c++17") == (
            f"{accelerator.path} -std=c++17 -pedantic"
        )

    def test_static_runtime(self, accelerator):
        assert accelerator("cc -static-libstdc++") == (
            f"{accelerator.path} -static-libstdc++ -static-libgcc"
        )
