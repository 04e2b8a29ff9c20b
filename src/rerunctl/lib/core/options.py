# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Add and remove option assignments, keeping three things in step.

For the command touched: its ``OPTIONS`` list and its generated
``options.sh``.  For the module: the option declaration, which exists
exactly as long as some command still assigns it.

There is no rollback across the several file writes of one operation; a
failure part-way leaves whatever was written before it.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from .._util.fs import atomic_write_text
from .._util.logging_utils import _log_debug
from ..codegen import build_branches, find_collisions, render_options_script
from ..errors import (
    FlagCollision,
    MalformedRecord,
    OptionConflict,
    OptionNotAssigned,
    UsageError,
)
from .config import get_option_defaults
from .models import OptionDeclaration
from .registry import OptionRegistry

_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_SHORT_RE = re.compile(r"^[A-Za-z0-9]$")


def validate_name(kind: str, name: str) -> str | None:
    """Return an error message if *name* is not a valid module/command/option name."""
    if not name:
        return f"{kind} name cannot be empty."
    if not _NAME_RE.match(name):
        return (
            f"{kind} name must contain only alphanumeric characters, hyphens, "
            f"and underscores, and start with an alphanumeric character: {name!r}"
        )
    return None


def _require_name(kind: str, name: str) -> None:
    error = validate_name(kind, name)
    if error:
        raise UsageError(error)


def validate_flags(decl: OptionDeclaration) -> str | None:
    """Return an error message if *decl*'s flags cannot appear in a case pattern."""
    if decl.short and not _SHORT_RE.match(decl.short):
        return f"short flag must be a single letter or digit: {decl.short!r}"
    if not _NAME_RE.match(decl.long):
        return (
            "long flag must contain only alphanumeric characters, hyphens, and "
            f"underscores, and start with an alphanumeric character: {decl.long!r}"
        )
    return None


@dataclass
class OptionSpec:
    """An add-option request.  ``None`` means "not given on the command line"."""

    name: str
    description: str = ""
    default: str = ""
    required: bool | None = None
    export: bool | None = None
    arg: bool | None = None
    short: str | None = None
    long: str | None = None

    def resolve(self, defaults: dict[str, bool] | None = None) -> OptionDeclaration:
        """Fill in what was not given and return the declaration to store.

        The short flag defaults to the first character of the name and the
        long flag to the name itself.  ``required``/``export``/``arg`` fall
        back to *defaults* (see ``config.get_option_defaults``).
        """
        defaults = defaults if defaults is not None else get_option_defaults()

        def pick(value: bool | None, key: str) -> bool:
            return defaults[key] if value is None else value

        return OptionDeclaration(
            name=self.name,
            description=self.description,
            short=self.name[:1] if self.short is None else self.short,
            long=self.long or self.name,
            default=self.default,
            required=pick(self.required, "required"),
            export=pick(self.export, "export"),
            arg=pick(self.arg, "arg"),
        )


@dataclass
class AddResult:
    declaration: OptionDeclaration
    declared: bool  # a new declaration record was created
    assigned: bool  # the option was appended to the command's list
    options: list[str]
    script: Path


@dataclass
class RemoveResult:
    option: str
    undeclared: bool  # the declaration was deleted (last assignment gone)
    still_used_by: set[str]
    options: list[str]
    script: Path


def _require_target(module: str, command: str) -> None:
    _require_name("Module", module)
    _require_name("Command", command)


def write_options_script(
    registry: OptionRegistry, module: str, command: str, options: list[str]
) -> Path:
    """Regenerate ``options.sh`` for *command* from the given option list.

    Refuses declarations whose flags are not plain words and option sets
    where two options claim the same flag or variable.
    """
    decls = [registry.get_declaration(module, name) for name in options]
    for decl in decls:
        error = validate_flags(decl)
        if error:
            raise MalformedRecord(registry.option_record_path(module, decl.name), error)
    problems = find_collisions(build_branches(decls))
    if problems:
        raise UsageError(
            f"{module}:{command}: {'; '.join(problems)}", module=module, command=command
        )

    path = registry.options_script_path(module, command)
    try:
        atomic_write_text(path, render_options_script(module, command, decls))
    except OSError as exc:
        raise MalformedRecord(path, exc.strerror or str(exc)) from exc
    _log_debug(f"options: wrote {path} ({len(decls)} options)")
    return path


def generate_options(registry: OptionRegistry, module: str, command: str) -> Path:
    """Regenerate a command's parser from its current metadata, changing nothing else."""
    _require_target(module, command)
    options = registry.get_command_options(module, command)
    return write_options_script(registry, module, command, options)


def add_option(
    registry: OptionRegistry,
    module: str,
    command: str,
    spec: OptionSpec,
    *,
    reuse: bool = False,
) -> AddResult:
    """Assign option *spec* to *command*, declaring it in *module* if new.

    If the module already declares the option with different attributes,
    raises OptionConflict unless *reuse* is set, in which case the existing
    declaration is assigned as it is.  An option whose flag or variable is
    already taken by another option of the command raises FlagCollision.
    Adding an option the command already has only regenerates the
    (unchanged) parser.
    """
    _log_debug(f"add_option: start {module}:{command} option={spec.name}")
    _require_target(module, command)
    options = registry.get_command_options(module, command)
    _require_name("Option", spec.name)
    decl = spec.resolve()
    error = validate_flags(decl)
    if error:
        raise UsageError(error, module=module, command=command, option=spec.name)

    exists = registry.has_declaration(module, spec.name)
    if exists:
        existing = registry.get_declaration(module, spec.name)
        differing = existing.differing_fields(decl)
        if differing and not reuse:
            raise OptionConflict(module, command, spec.name, differing)
        decl = existing

    assigned = spec.name not in options
    if assigned:
        current = [registry.get_declaration(module, name) for name in options]
        problems = find_collisions(build_branches([*current, decl]))
        if problems:
            raise FlagCollision(module, command, spec.name, problems)

    declared = False
    if not exists:
        declared = registry.declare_option(module, decl)
        _log_debug(f"add_option: declared {module}/options/{spec.name}")

    if assigned:
        options = registry.set_command_options(module, command, [*options, spec.name])
        _log_debug(f"add_option: OPTIONS={' '.join(options)}")

    script = write_options_script(registry, module, command, options)
    _log_debug("add_option: finished")
    return AddResult(decl, declared, assigned, options, script)


def remove_option(registry: OptionRegistry, module: str, command: str, option: str) -> RemoveResult:
    """Unassign *option* from *command*; delete its declaration if now unused."""
    _log_debug(f"remove_option: start {module}:{command} option={option}")
    _require_target(module, command)
    _require_name("Option", option)
    options = registry.get_command_options(module, command)
    if option not in options:
        raise OptionNotAssigned(module, command, option)

    remaining = registry.set_command_options(
        module, command, [name for name in options if name != option]
    )
    _log_debug(f"remove_option: OPTIONS={' '.join(remaining)}")
    script = write_options_script(registry, module, command, remaining)

    users = registry.list_commands_using(module, option)
    undeclared = not users
    if undeclared:
        registry.undeclare_option(module, option)
        _log_debug(f"remove_option: undeclared {module}/options/{option}")
    else:
        _log_debug(f"remove_option: kept declaration, used by {', '.join(sorted(users))}")
    _log_debug("remove_option: finished")
    return RemoveResult(option, undeclared, users, remaining, script)
