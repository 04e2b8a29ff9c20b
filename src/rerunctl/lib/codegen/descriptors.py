# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Language-neutral description of what a command's option parser parses.

A :class:`FlagBranch` says which flags map to which variable and what
happens after parsing (default, required check, export).  Renderers such
as :class:`rerunctl.lib.codegen.bash.BashRenderer` decide how it is written.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from ..core.models import OptionDeclaration

_NON_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")

HELP_FLAGS = ("--help", "-h")


def shell_var_name(option: str) -> str:
    """Variable an option is parsed into: ``max-height`` -> ``MAX_HEIGHT``."""
    var = _NON_IDENT_RE.sub("_", option).upper()
    if var[:1].isdigit():
        var = f"_{var}"
    return var


@dataclass(frozen=True)
class FlagBranch:
    option: str
    var: str
    # Flag spellings in match order, e.g. ("-j", "--jumps").
    flags: tuple[str, ...]
    long_flag: str
    takes_arg: bool
    default: str
    required: bool
    export: bool
    description: str

    @property
    def has_default(self) -> bool:
        return self.default != ""

    @property
    def usage(self) -> str:
        """Usage fragment: ``--jumps|-j <1>``, bracketed unless required."""
        spelled = "|".join(sorted(self.flags, key=lambda f: not f.startswith("--")))
        if self.takes_arg:
            spelled = f"{spelled} <{self.default}>"
        if self.required and not self.has_default:
            return spelled
        return f"[ {spelled}]"


def branch_for(decl: OptionDeclaration) -> FlagBranch:
    flags = []
    if decl.short:
        flags.append(f"-{decl.short}")
    long_flag = f"--{decl.long}"
    flags.append(long_flag)
    return FlagBranch(
        option=decl.name,
        var=shell_var_name(decl.name),
        flags=tuple(flags),
        long_flag=long_flag,
        takes_arg=decl.arg,
        default=decl.default,
        required=decl.required,
        export=decl.export,
        description=" ".join(decl.description.split()),
    )


def build_branches(decls: Iterable[OptionDeclaration]) -> list[FlagBranch]:
    """One branch per declaration, in the command's assignment order."""
    return [branch_for(decl) for decl in decls]


def find_collisions(branches: Iterable[FlagBranch]) -> list[str]:
    """Describe every flag or variable claimed by more than one branch.

    A later branch sharing a flag with an earlier one can never be matched
    by that flag; two options sharing a variable overwrite each other.
    """
    owners: dict[str, str] = {}
    problems = []
    for branch in branches:
        claims = [("flag", flag) for flag in branch.flags] + [("variable", branch.var)]
        for kind, value in claims:
            key = f"{kind}:{value}"
            owner = owners.setdefault(key, branch.option)
            if owner != branch.option:
                problems.append(f"{kind} {value} of {branch.option} is already used by {owner}")
    return problems


def help_flags(branches: Iterable[FlagBranch]) -> tuple[str, ...]:
    """Help spellings not already claimed by a declared option."""
    claimed = {flag for branch in branches for flag in branch.flags}
    return tuple(flag for flag in HELP_FLAGS if flag not in claimed)
