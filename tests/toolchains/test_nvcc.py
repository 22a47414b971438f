# SPDX-License-Identifier: MIT
"""Tests for ninjaconf.toolchains.nvcc."""

import pytest

from ninjaconf.configure.platform import Platform
from ninjaconf.toolchains.registry import ToolchainRegistry
from ninjaconf.toolchains.toolchain import Family


@pytest.fixture
def nvcc(compile_line, host):
    registry = ToolchainRegistry(host, Platform("linux", "x86_64"), ".")
    registry.declare("c++", "gcc", "g++", "12.2.0", "x86_64")

    def run(text, **kwargs):
        return compile_line(
            text, family=Family.NVCC, path="nvcc", registry=registry, **kwargs
        )

    return run


class TestNvcc:
    def test_host_flags_go_through_xcompiler(self, nvcc):
        assert nvcc("nvcc -c a.cu -o a.o -O2") == (
            "nvcc -ccbin g++ -m64 -c a.cu -o a.o -Xcompiler -O2"
        )

    def test_cpp_only_inputs_are_cuda(self, nvcc):
        expected = "nvcc -ccbin g++ -x cu -m64 -c k.cpp -o k.o"
        assert nvcc("nvcc -c k.cpp -o k.o") == expected

    def test_explicit_language(self, nvcc):
        assert nvcc("nvcc -x c++ -c k.cpp").startswith("nvcc -ccbin g++ -x c++ -m64")

    def test_standard_for_both(self, nvcc):
        words = nvcc("nvcc -std=c++17 -c a.cu")
        assert "-std c++17" in words
        assert words.endswith("-Xcompiler -std=c++17")

    def test_device_architecture(self, nvcc):
        assert "-arch=sm_75" in nvcc("nvcc -msm_75 a.cu").split()

    def test_fast_math(self, nvcc):
        words = nvcc("nvcc -ffast-math a.cu")
        assert "--use_fast_math" in words
        assert words.endswith("-Xcompiler -ffast-math")

    def test_library_dir_rpath(self, nvcc):
        words = nvcc("nvcc a.cu -L/opt/lib")
        assert "-L/opt/lib -Xlinker '-rpath=/opt/lib'" in words

    def test_debug(self, nvcc):
        assert "-g -G -lineinfo" in nvcc("nvcc -g a.cu")
