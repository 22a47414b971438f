# SPDX-License-Identifier: MIT
"""Compiler command translation entry point.

Picks the flag translator for a toolchain family and, when header
dependencies are requested, inserts the placeholder later replaced by
the dependency flags of the family.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ninjaconf.toolchains.common import AUTODEPS_PLACEHOLDER, BaseFlagTranslator
from ninjaconf.toolchains.gcc import GccClangTranslator
from ninjaconf.toolchains.intel import IccTranslator
from ninjaconf.toolchains.llvm import HipTranslator
from ninjaconf.toolchains.msvc import BASE_COMMAND, MsvcTranslator
from ninjaconf.toolchains.nvcc import NvccTranslator
from ninjaconf.toolchains.toolchain import Family

if TYPE_CHECKING:
    from ninjaconf.core.tokenizer import Action, Token
    from ninjaconf.shell.commands import Shell
    from ninjaconf.toolchains.registry import ToolchainRegistry
    from ninjaconf.toolchains.toolchain import ToolchainInfo

_TRANSLATORS: dict[Family, type[BaseFlagTranslator]] = {
    Family.GCC: GccClangTranslator,
    Family.CLANG: GccClangTranslator,
    Family.ARMCLANG: GccClangTranslator,
    Family.HIPCC: HipTranslator,
    Family.HCC: HipTranslator,
    Family.DPCPP: HipTranslator,
    Family.ICC: IccTranslator,
    Family.MSVC: MsvcTranslator,
}


def translate_compiler(
    info: ToolchainInfo,
    tokens: list[Token],
    action: Action,
    *,
    shell: Shell,
    registry: ToolchainRegistry,
    autodeps: bool = False,
) -> list[str]:
    """Translate a compiler command line for a resolved toolchain.

    Args:
        info: Toolchain the command head resolved to.
        tokens: The command line, head included.
        action: Translation mode of the line.
        shell: Host shell.
        registry: Toolchains, for nvcc's host compiler.
        autodeps: Insert the header dependency placeholder.

    Returns:
        The words of the concrete command line.

    Raises:
        ParseError: On an option the toolchain cannot translate.
    """
    if info.family is Family.NVCC:
        host_info = registry.resolve(registry.cuda_host_name(info))

        def host_translate(host_tokens: list[Token]) -> list[str]:
            # nvcc produces header dependencies itself
            return translate_compiler(
                host_info, host_tokens, action, shell=shell, registry=registry
            )

        translator: BaseFlagTranslator = NvccTranslator(
            info, shell, action, host_info, host_translate
        )
    else:
        translator = _TRANSLATORS[info.family](info, shell, action)

    words = translator.translate(tokens)
    if autodeps and "--version" not in (t.text for t in tokens):
        if info.family is Family.MSVC:
            # /showIncludes must come before any /link argument
            words.insert(len(BASE_COMMAND), AUTODEPS_PLACEHOLDER)
        else:
            words.append(AUTODEPS_PLACEHOLDER)
    return words


def autodeps_flags(family: Family, depfile: str, shell: Shell) -> str:
    """Flags making a compiler of ``family`` report header dependencies."""
    if family.deps_style == "msvc":
        return "/showIncludes"
    return "-MMD -MF " + shell.ify(depfile)
