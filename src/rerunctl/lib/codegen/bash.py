# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Render flag branches as a sourceable bash ``options.sh``.

The output is a pure function of the module/command names and the branch
list: no timestamps, no set iteration, so regenerating from unchanged
metadata gives a byte-identical file.
"""

from collections.abc import Iterable

from .._util.template_utils import render_template
from ..core.models import OptionDeclaration
from .descriptors import FlagBranch, build_branches, help_flags

TEMPLATE_NAME = "options.sh.template"

_CASE_INDENT = " " * 8


def double_quote(value: str) -> str:
    """Quote *value* for bash so it expands to exactly itself."""
    escaped = (
        value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$").replace("`", "\\`")
    )
    return f'"{escaped}"'


class BashRenderer:
    """Visitor emitting one bash fragment per branch and per post-parse rule."""

    def visit_branch(self, branch: FlagBranch) -> str:
        pattern = "|".join(branch.flags)
        if branch.takes_arg:
            body = f'rerun_option_check $# "$1" ; {branch.var}="$2" ; shift ;;'
        else:
            body = f"{branch.var}=true ;;"
        return f"{_CASE_INDENT}{pattern}) {body}"

    def visit_help(self, flags: tuple[str, ...]) -> str:
        return f"{_CASE_INDENT}{'|'.join(flags)}) rerun_option_usage ; exit 0 ;;"

    def visit_default(self, branch: FlagBranch) -> str:
        return f'[ -z "${branch.var}" ] && {branch.var}={double_quote(branch.default)}'

    def visit_required(self, branch: FlagBranch) -> str:
        message = double_quote(f"missing required option: {branch.long_flag}")
        return f'[ -z "${branch.var}" ] && rerun_option_error {message}'

    def visit_export(self, branch: FlagBranch) -> str:
        return f"export {branch.var}"

    def usage(self, module: str, command: str, branches: list[FlagBranch]) -> str:
        synopsis = " ".join([f"{module}:{command}"] + [b.usage for b in branches])
        lines = [f"Usage: {synopsis}"]
        if branches:
            lines.append("Options:")
            for b in branches:
                lines.append(f"  {b.usage}: {b.description}" if b.description else f"  {b.usage}")
        return "\n".join(lines)

    def post_parse(self, branches: list[FlagBranch]) -> str:
        sections: list[tuple[str, list[str]]] = [
            (
                "# If defaultable option variables are unset, set them to their default.",
                [self.visit_default(b) for b in branches if b.has_default],
            ),
            (
                "# Check required options are set.",
                [self.visit_required(b) for b in branches if b.required and not b.has_default],
            ),
            (
                "# Export the options declared exportable.",
                [self.visit_export(b) for b in branches if b.export],
            ),
        ]
        parts = []
        for header, lines in sections:
            if lines:
                parts.append("\n".join([header, *lines]))
        return "\n" + "\n\n".join(parts) + "\n" if parts else ""

    def render(self, module: str, command: str, branches: list[FlagBranch]) -> str:
        case_lines = [self.visit_branch(b) for b in branches]
        flags = help_flags(branches)
        if flags:
            case_lines.append(self.visit_help(flags))
        return render_template(
            TEMPLATE_NAME,
            {
                "MODULE": module,
                "COMMAND": command,
                "BRANCHES": "\n".join(case_lines),
                "POST_PARSE": self.post_parse(branches),
                "USAGE": self.usage(module, command, branches),
            },
        )


def render_options_script(
    module: str, command: str, decls: Iterable[OptionDeclaration]
) -> str:
    """Render the ``options.sh`` text for *command* from its ordered declarations."""
    return BashRenderer().render(module, command, build_branches(decls))
