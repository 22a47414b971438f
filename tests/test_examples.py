# SPDX-License-Identifier: MIT
"""Test runner for example projects.

Discovers and runs all example projects in examples/.
Each example is a self-contained project that serves as both
a test and documentation for users.

Every example is configured from a fresh ``build`` directory, as a user
would do, through both invocation methods:
- Module: python -m ninjaconf ..
- Script: the installed ninjaconf console script
"""

from __future__ import annotations

import platform
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

# Try to import tomllib (Python 3.11+) or tomli as fallback
try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib  # type: ignore[import-not-found]
    except ImportError:
        tomllib = None  # type: ignore[assignment]


EXAMPLES_DIR = Path(__file__).parent.parent / "examples"
IS_WINDOWS = platform.system().lower() == "windows"


def adapt_path_for_windows(path: str) -> str:
    """Adapt a Unix-style path for Windows.

    Converts:
        build/program -> build\\program.exe
        build/file.o -> build\\file.obj
    """
    path = path.replace("/", "\\")
    if path.endswith(".o"):
        return path[:-2] + ".obj"
    directory, _, name = path.rpartition("\\")
    if directory and "." not in name:
        path += ".exe"
    return path


def adapt_command_for_windows(cmd: str) -> str:
    """Adapt a Unix-style command for Windows.

    Converts:
        cat file -> type file
        build/program -> build\\program.exe
    """
    if cmd.startswith("cat "):
        return "type " + cmd[4:].replace("/", "\\")
    parts = cmd.split(maxsplit=1)
    if parts:
        parts[0] = adapt_path_for_windows(parts[0])
    return " ".join(parts)


def parse_ninja_output(output: str) -> tuple[list[str], bool]:
    """Parse ninja output to extract rebuilt targets.

    Rules carry no description, so ninja prints the command of every
    edge it runs after a ``[N/M]`` progress marker.

    Returns:
        Tuple of (list of commands run, is_no_work)
    """
    is_no_work = "ninja: no work to do." in output

    rebuilt: list[str] = []
    for line in output.splitlines():
        line = line.strip()
        if line.startswith("[") and "]" in line:
            rebuilt.append(line.split("]", 1)[1].strip())
    return rebuilt, is_no_work


def run_rebuild_test(
    work_dir: Path,
    build_dir: Path,
    rebuild_config: dict[str, Any],
) -> None:
    """Run a single rebuild test scenario.

    Args:
        work_dir: Example directory
        build_dir: Build output directory
        rebuild_config: Dict with keys like 'description', 'touch',
            'expect_rebuild', 'expect_no_rebuild', 'expect_no_work'
    """
    description = rebuild_config.get("description", "unnamed rebuild test")

    touch_file = rebuild_config.get("touch")
    if touch_file:
        touch_path = work_dir / touch_file
        if not touch_path.exists():
            pytest.fail(
                f"Rebuild test '{description}': touch file not found: {touch_file}"
            )
        touch_path.touch()

    result = subprocess.run(
        ["ninja", "-C", str(build_dir)],
        cwd=work_dir,
        capture_output=True,
        text=True,
        timeout=120,
    )
    if result.returncode != 0:
        print(f"Ninja stdout:\n{result.stdout}")
        print(f"Ninja stderr:\n{result.stderr}")
        pytest.fail(
            f"Rebuild test '{description}': ninja failed with code {result.returncode}"
        )

    rebuilt, is_no_work = parse_ninja_output(result.stdout)

    if rebuild_config.get("expect_no_work") and not is_no_work:
        pytest.fail(
            f"Rebuild test '{description}': expected no work, "
            f"but ninja ran: {rebuilt}"
        )

    for expected in rebuild_config.get("expect_rebuild", []):
        if not any(expected in command for command in rebuilt):
            pytest.fail(
                f"Rebuild test '{description}': expected '{expected}' to be "
                f"rebuilt, but ninja ran: {rebuilt}"
            )

    for not_expected in rebuild_config.get("expect_no_rebuild", []):
        if any(not_expected in command for command in rebuilt):
            pytest.fail(
                f"Rebuild test '{description}': expected '{not_expected}' NOT "
                f"to be rebuilt, but ninja ran: {rebuilt}"
            )


def discover_examples() -> list[Path]:
    """Discover all example directories with a build.ninjaconf and test.toml."""
    if not EXAMPLES_DIR.exists():
        return []
    return [
        item
        for item in sorted(EXAMPLES_DIR.iterdir())
        if (item / "build.ninjaconf").exists() and (item / "test.toml").exists()
    ]


def load_test_config(example_dir: Path) -> dict[str, Any]:
    """Load test.toml configuration."""
    if tomllib is None:
        pytest.skip("tomllib/tomli not available")

    with open(example_dir / "test.toml", "rb") as f:
        return tomllib.load(f)


def should_skip(config: dict[str, Any]) -> str | None:
    """Check if this test should be skipped. Returns skip reason or None."""
    skip_config = config.get("skip", {})

    current_platform = platform.system().lower()
    if current_platform in [p.lower() for p in skip_config.get("platforms", [])]:
        return f"Skipped on {current_platform}"

    for tool in skip_config.get("requires", []):
        if shutil.which(tool) is None:
            return f"Required tool '{tool}' not found"

    return None


def get_platform_value(
    config: dict[str, Any],
    key: str,
    default: Any = None,
    adapt_for_windows: bool = False,
) -> Any:
    """Get a platform-specific value from config.

    ``key_windows``, ``key_linux`` or ``key_darwin`` override ``key`` on
    the matching host. Without an override, Unix paths are adapted on
    Windows when ``adapt_for_windows`` is set.
    """
    platform_key = f"{key}_{platform.system().lower()}"
    if platform_key in config:
        return config[platform_key]

    value = config.get(key, default)
    if adapt_for_windows and IS_WINDOWS and value is not None:
        if isinstance(value, list):
            return [adapt_path_for_windows(str(v)) for v in value]
        if isinstance(value, str):
            return adapt_path_for_windows(value)
    return value


def configure_command(invocation: str) -> list[str]:
    """Command running ninjaconf for an invocation method."""
    if invocation == "module":
        return [sys.executable, "-m", "ninjaconf"]
    script = shutil.which("ninjaconf")
    if script is None:
        pytest.skip("ninjaconf console script not installed")
    return [script]


def run_verify_commands(config: dict[str, Any], work_dir: Path) -> None:
    verify_config = config.get("verify", {})
    has_platform_override = (
        f"commands_{platform.system().lower()}" in verify_config
    )
    for cmd_config in get_platform_value(verify_config, "commands", []):
        run_cmd = cmd_config.get("run")
        if not run_cmd:
            continue
        if IS_WINDOWS and not has_platform_override:
            run_cmd = adapt_command_for_windows(run_cmd)

        # Resolve command path relative to work_dir
        first = run_cmd.split()[0]
        if (work_dir / first).exists():
            run_cmd = str(work_dir / first) + run_cmd[len(first) :]

        result = subprocess.run(
            run_cmd,
            shell=True,
            cwd=work_dir,
            capture_output=True,
            text=True,
            timeout=30,
        )

        expected_code = cmd_config.get("expect_returncode", 0)
        if result.returncode != expected_code:
            print(f"Command stdout:\n{result.stdout}")
            print(f"Command stderr:\n{result.stderr}")
            pytest.fail(
                f"Command '{run_cmd}' returned {result.returncode}, "
                f"expected {expected_code}"
            )

        expect_stdout = cmd_config.get("expect_stdout")
        if expect_stdout is not None and expect_stdout not in result.stdout:
            pytest.fail(f"Expected '{expect_stdout}' in stdout, got:\n{result.stdout}")


def run_example(example_dir: Path, tmp_path: Path, invocation: str) -> None:
    """Configure, build and check a single example project.

    Args:
        example_dir: Path to the example directory
        tmp_path: Temporary directory for test isolation
        invocation: "module" or "script", see :func:`configure_command`
    """
    config = load_test_config(example_dir)
    test_config = config.get("test", {})

    skip_reason = should_skip(config)
    if skip_reason:
        pytest.skip(skip_reason)

    # Copy example to temp directory (so we don't pollute the source tree)
    work_dir = tmp_path / example_dir.name
    shutil.copytree(example_dir, work_dir)
    build_dir = work_dir / "build"
    build_dir.mkdir(exist_ok=True)

    cmd = configure_command(invocation) + test_config.get("args", []) + [".."]
    result = subprocess.run(
        cmd,
        cwd=build_dir,
        capture_output=True,
        text=True,
        timeout=60,
    )
    if result.returncode != 0:
        print(f"ninjaconf stdout:\n{result.stdout}")
        print(f"ninjaconf stderr:\n{result.stderr}")
        pytest.fail(f"ninjaconf failed with code {result.returncode}")

    build_command = test_config.get("build_command")
    if build_command:
        # Custom build command (e.g., "make -C build")
        build_tool = build_command.split()[0]
        if shutil.which(build_tool) is None:
            pytest.skip(f"{build_tool} not available")
        result = subprocess.run(
            build_command,
            shell=True,
            cwd=work_dir,
            capture_output=True,
            text=True,
            timeout=120,
        )
        if result.returncode != 0:
            print(f"Build stdout:\n{result.stdout}")
            print(f"Build stderr:\n{result.stderr}")
            pytest.fail(f"Build command failed with code {result.returncode}")
    else:
        ninja_file = build_dir / "build.ninja"
        if not ninja_file.exists():
            pytest.fail(f"build.ninja not generated in {build_dir}")
        if shutil.which("ninja") is None:
            pytest.skip("ninja not available")

        # Paths in build.ninja are relative to the build dir
        result = subprocess.run(
            ["ninja", "-C", str(build_dir)],
            cwd=work_dir,
            capture_output=True,
            text=True,
            timeout=120,
        )
        if result.returncode != 0:
            print(f"Ninja stdout:\n{result.stdout}")
            print(f"Ninja stderr:\n{result.stderr}")
            print(f"build.ninja contents:\n{ninja_file.read_text()}")
            pytest.fail(f"ninja failed with code {result.returncode}")

    expected_outputs = get_platform_value(
        test_config, "expected_outputs", [], adapt_for_windows=True
    )
    for output in expected_outputs:
        if not (work_dir / output).exists():
            pytest.fail(f"Expected output not found: {output}")

    run_verify_commands(config, work_dir)

    # Rebuild tests only need one invocation method
    rebuild_tests = config.get("rebuild", [])
    if rebuild_tests and invocation == "module" and not build_command:
        for rebuild_config in rebuild_tests:
            run_rebuild_test(work_dir, build_dir, rebuild_config)


# Discover examples and create test parameters
EXAMPLES = discover_examples()

INVOCATIONS = ["module", "script"]


@pytest.mark.parametrize("invocation", INVOCATIONS, ids=INVOCATIONS)
@pytest.mark.parametrize(
    "example_dir",
    EXAMPLES,
    ids=[e.name for e in EXAMPLES],
)
def test_example(example_dir: Path, tmp_path: Path, invocation: str) -> None:
    """Run an example project end-to-end."""
    run_example(example_dir, tmp_path, invocation)


# If no examples found, create a placeholder test
if not EXAMPLES:

    def test_no_examples() -> None:
        """Placeholder when no examples are found."""
        pytest.skip("No example projects found in examples/")
