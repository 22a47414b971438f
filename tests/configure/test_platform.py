# SPDX-License-Identifier: MIT
"""Tests for ninjaconf.configure.platform."""

from ninjaconf.configure.platform import (
    WINDOWS_MAX_COMMAND_LENGTH,
    Platform,
    get_platform,
)
from ninjaconf.toolchains.toolchain import Family


class TestPlatform:
    def test_predicates(self):
        linux = Platform("linux", "x86_64")
        assert linux.is_linux and linux.is_posix
        assert not linux.is_bsd
        assert Platform("darwin", "arm64").is_bsd
        assert Platform("freebsd", "amd64").is_bsd
        assert Platform("windows", "amd64").is_windows

    def test_os_letter(self):
        assert Platform("linux", "x86_64").os_letter == "L"
        assert Platform("darwin", "arm64").os_letter == "L"
        assert Platform("windows", "amd64").os_letter == "W"

    def test_default_prefix(self):
        assert Platform("linux", "x86_64").default_prefix == "/opt/local"
        assert Platform("windows", "amd64").default_prefix == "C:/Program Files"

    def test_get_platform_is_cached(self):
        assert get_platform() is get_platform()


class TestCommandLength:
    def test_limits(self):
        assert Platform("linux", "x86_64").max_command_length == 131071
        assert Platform("linux", "x86_64", page_size=16384).max_command_length == (
            524287
        )
        windows = Platform("windows", "amd64")
        assert windows.max_command_length == WINDOWS_MAX_COMMAND_LENGTH
        assert Platform("darwin", "arm64", arg_max=1048576).max_command_length == (
            1048575
        )

    def test_joined_length(self):
        assert Platform("linux", "x86_64").command_length(["ab", "cde"]) == 13
        assert Platform("windows", "amd64").command_length(["ab", "cde"]) == 30


class TestExtensions:
    def test_gnu_on_linux(self):
        ext = Platform("linux", "x86_64").extensions(Family.GCC)
        assert (ext.obj, ext.static_lib, ext.shared_lib, ext.exe) == (
            ".o",
            ".a",
            ".so",
            "",
        )

    def test_macos_shared_lib(self):
        assert Platform("darwin", "arm64").extensions(Family.CLANG).shared_lib == (
            ".dylib"
        )

    def test_msvc(self):
        ext = Platform("windows", "amd64").extensions(Family.MSVC)
        assert (ext.asm, ext.obj, ext.shared_link, ext.exe) == (
            ".asm",
            ".obj",
            ".lib",
            ".exe",
        )

    def test_nvcc_follows_host(self):
        assert Platform("windows", "amd64").extensions(Family.NVCC).obj == ".obj"
        assert Platform("linux", "x86_64").extensions(Family.NVCC).obj == ".o"

    def test_mingw(self):
        ext = Platform("windows", "amd64").extensions(Family.GCC)
        assert (ext.obj, ext.shared_link) == (".o", ".a")


class TestRpath:
    def test_linux(self):
        linux = Platform("linux", "x86_64")
        assert linux.rpath_argument(".") == "-rpath=$ORIGIN"
        assert linux.rpath_argument("./lib") == "-rpath=$ORIGINlib"
        assert linux.rpath_argument("/opt/lib") == "-rpath=/opt/lib"

    def test_bsd(self):
        assert Platform("darwin", "arm64").rpath_argument("/opt/lib") == (
            "-rpath,/opt/lib"
        )
