# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Option commands: add-option, rm-option, generate-options, list-options."""

from __future__ import annotations

import argparse
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...lib.core.config import modules_root
from ...lib.core.options import (
    OptionSpec,
    add_option,
    generate_options,
    remove_option,
    validate_name,
)
from ...lib.core.registry import OptionRegistry
from ...lib.errors import UsageError
from ...lib.prompts import read_option_name
from ...ui_utils.terminal import green as _green, supports_color as _supports_color, yellow as _yellow
from ._completers import (
    complete_assigned_options,
    complete_commands,
    complete_modules,
    set_completer,
)

_TRUE_WORDS = ("true", "yes", "1")
_FALSE_WORDS = ("false", "no", "0")


def parse_bool(value: str) -> bool:
    """argparse type for ``true|false`` flag values."""
    lowered = value.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def _add_target_args(p: argparse.ArgumentParser) -> None:
    """Positional ``module:command`` plus the equivalent ``--module``/``--command``."""
    p.add_argument("target", nargs="?", metavar="MODULE:COMMAND", help="Module and command")
    set_completer(
        p.add_argument("--module", "-m", help="Module name"),
        complete_modules,
    )
    set_completer(
        p.add_argument("--command", "-c", help="Command name"),
        complete_commands,
    )


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register option subcommands."""
    # add-option
    p_add = subparsers.add_parser(
        "add-option",
        help="Assign an option to a command (declaring it in the module if new)",
    )
    _add_target_args(p_add)
    p_add.add_argument("--option", "-o", help="Option name (prompted for when omitted)")
    p_add.add_argument("--desc", "--description", dest="desc", default="", help="Description")
    p_add.add_argument("--default", default="", help="Default value")
    p_add.add_argument("--required", type=parse_bool, metavar="true|false")
    p_add.add_argument("--export", type=parse_bool, metavar="true|false")
    p_add.add_argument(
        "--arg", type=parse_bool, metavar="true|false", help="Whether the option takes a value"
    )
    p_add.add_argument("--short", help="Short flag letter (default: first letter of the name)")
    p_add.add_argument("--long", help="Long flag name (default: the option name)")
    p_add.add_argument(
        "--reuse",
        action="store_true",
        help="Assign the module's existing declaration even if its attributes differ",
    )

    # rm-option
    p_rm = subparsers.add_parser(
        "rm-option",
        help="Unassign an option from a command (deleting it once no command uses it)",
    )
    _add_target_args(p_rm)
    set_completer(
        p_rm.add_argument("--option", "-o", help="Option name (prompted for when omitted)"),
        complete_assigned_options,
    )

    # generate-options
    p_gen = subparsers.add_parser(
        "generate-options", help="Regenerate a command's options.sh from its metadata"
    )
    _add_target_args(p_gen)

    # list-options
    p_list = subparsers.add_parser(
        "list-options", help="Show a module's option declarations and their commands"
    )
    set_completer(p_list.add_argument("module", help="Module name"), complete_modules)


def resolve_target(args: argparse.Namespace) -> tuple[str, str]:
    """Return (module, command) from ``module:command`` and/or the flags."""
    module, command = args.module, args.command
    if args.target:
        t_module, sep, t_command = args.target.partition(":")
        if not sep:
            raise UsageError(f"expected MODULE:COMMAND, got {args.target!r}")
        if (module and module != t_module) or (command and command != t_command):
            raise UsageError(f"{args.target} contradicts --module/--command")
        module, command = t_module, t_command
    if not module or not command:
        raise UsageError("both a module and a command are required")
    for kind, name in (("Module", module), ("Command", command)):
        error = validate_name(kind, name)
        if error:
            raise UsageError(error)
    return module, command


def _registry(args: argparse.Namespace) -> OptionRegistry:
    return OptionRegistry(modules_root(getattr(args, "modules_dir", None)))


def cmd_add_option(args: argparse.Namespace) -> None:
    registry = _registry(args)
    module, command = resolve_target(args)
    name = args.option
    if not name:
        # Fail on a missing command before prompting.
        registry.get_command(module, command)
        name = read_option_name(sys.stdin, module=module, command=command)
    spec = OptionSpec(
        name=name,
        description=args.desc,
        default=args.default,
        required=args.required,
        export=args.export,
        arg=args.arg,
        short=args.short,
        long=args.long,
    )
    result = add_option(registry, module, command, spec, reuse=args.reuse)
    color_enabled = _supports_color()
    if result.assigned:
        print(_green(f"Assigned --{result.declaration.long} to {module}:{command}", color_enabled))
    else:
        print(_yellow(f"{module}:{command} already has --{result.declaration.long}", color_enabled))
    print(f"Wrote {result.script}")


def cmd_rm_option(args: argparse.Namespace) -> None:
    registry = _registry(args)
    module, command = resolve_target(args)
    name = args.option
    if not name:
        name = read_option_name(
            sys.stdin,
            choices=registry.get_command_options(module, command),
            module=module,
            command=command,
        )
    result = remove_option(registry, module, command, name)
    color_enabled = _supports_color()
    print(_green(f"Removed {name} from {module}:{command}", color_enabled))
    if result.undeclared:
        print(f"Deleted declaration {module}/options/{name} (no command uses it)")
    else:
        users = ", ".join(sorted(result.still_used_by))
        print(_yellow(f"Kept declaration {name}, still used by: {users}", color_enabled))
    print(f"Wrote {result.script}")


def cmd_generate_options(args: argparse.Namespace) -> None:
    registry = _registry(args)
    module, command = resolve_target(args)
    print(f"Wrote {generate_options(registry, module, command)}")


def cmd_list_options(args: argparse.Namespace, console: Console | None = None) -> None:
    """Print a table of the module's declarations and the commands assigning each."""
    registry = _registry(args)
    module = args.module
    registry.get_module(module)
    console = console or Console()

    users: dict[str, list[str]] = {}
    for command in registry.list_commands(module):
        for name in registry.get_command_options(module, command):
            users.setdefault(name, []).append(command)

    table = Table(title=f"Options of module {module}")
    table.add_column("Option")
    table.add_column("Flags")
    table.add_column("Default")
    table.add_column("Required")
    table.add_column("Export")
    table.add_column("Commands")
    table.add_column("Description")
    for name in registry.list_declarations(module):
        decl = registry.get_declaration(module, name)
        flags = f"-{decl.short}|--{decl.long}" if decl.short else f"--{decl.long}"
        if decl.arg:
            flags += " <value>"
        commands = ", ".join(users.get(name, [])) or "[red]none (orphan)[/red]"
        table.add_row(
            escape(name),
            escape(flags),
            escape(decl.default),
            "yes" if decl.required else "no",
            "yes" if decl.export else "no",
            commands,
            escape(decl.description),
        )
    console.print(table)

    undeclared = sorted(n for n in users if not registry.has_declaration(module, n))
    for name in undeclared:
        console.print(
            f"[yellow]Warning:[/yellow] {name} is assigned to {', '.join(users[name])} "
            "but not declared"
        )


def dispatch(args: argparse.Namespace) -> bool:
    """Handle option commands.  Returns True if handled."""
    if args.cmd == "add-option":
        cmd_add_option(args)
        return True
    if args.cmd == "rm-option":
        cmd_rm_option(args)
        return True
    if args.cmd == "generate-options":
        cmd_generate_options(args)
        return True
    if args.cmd == "list-options":
        cmd_list_options(args)
        return True
    return False
