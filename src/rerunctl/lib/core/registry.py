# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Per-module option declarations and per-command option assignments.

Layout under the modules root::

    <module>/metadata
    <module>/commands/<command>/metadata      (OPTIONS='a b c')
    <module>/commands/<command>/options.sh    (generated parser)
    <module>/options/<option>/metadata        (declaration)

Whether a declaration is still in use is always recomputed from the
command records (:meth:`OptionRegistry.list_commands_using`); no reference
count is stored anywhere.
"""

from pathlib import Path

from ..errors import (
    CommandNotFound,
    ModuleNotFound,
    OptionAlreadyDeclared,
    OptionNotDeclared,
)
from . import metadata
from .models import CommandInfo, ModuleInfo, OptionDeclaration

METADATA = "metadata"
OPTIONS_SCRIPT = "options.sh"


class OptionRegistry:
    """Read/write access to the option metadata of every module under *root*."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    # ---------- Paths ----------

    def module_dir(self, module: str) -> Path:
        return self.root / module

    def command_dir(self, module: str, command: str) -> Path:
        return self.root / module / "commands" / command

    def option_dir(self, module: str, option: str) -> Path:
        return self.root / module / "options" / option

    def command_record_path(self, module: str, command: str) -> Path:
        return self.command_dir(module, command) / METADATA

    def option_record_path(self, module: str, option: str) -> Path:
        return self.option_dir(module, option) / METADATA

    def options_script_path(self, module: str, command: str) -> Path:
        return self.command_dir(module, command) / OPTIONS_SCRIPT

    # ---------- Modules ----------

    def list_modules(self) -> list[str]:
        """Return sorted names of directories under the root that hold a module record."""
        if not self.root.is_dir():
            return []
        return sorted(
            p.name for p in self.root.iterdir() if p.is_dir() and (p / METADATA).is_file()
        )

    def get_module(self, module: str) -> ModuleInfo:
        path = self.module_dir(module) / METADATA
        if not metadata.exists(path):
            raise ModuleNotFound(module)
        return ModuleInfo.from_record(metadata.read_record(path), module)

    # ---------- Commands ----------

    def list_commands(self, module: str) -> list[str]:
        """Return sorted names of the module's commands that have a metadata record."""
        commands_dir = self.module_dir(module) / "commands"
        if not commands_dir.is_dir():
            return []
        return sorted(
            p.name for p in commands_dir.iterdir() if p.is_dir() and (p / METADATA).is_file()
        )

    def get_command(self, module: str, command: str) -> CommandInfo:
        path = self.command_record_path(module, command)
        if not metadata.exists(path):
            raise CommandNotFound(module, command)
        return CommandInfo.from_record(metadata.read_record(path), command)

    def get_command_options(self, module: str, command: str) -> list[str]:
        """Return the command's assigned option names in assignment order."""
        return list(self.get_command(module, command).options)

    def set_command_options(self, module: str, command: str, ordered: list[str]) -> list[str]:
        """Persist *ordered* as the command's option list and return what was stored.

        Duplicates are dropped keeping the first occurrence, so callers
        append new names at the end and filter removed ones out.  All other
        keys of the command record are written back unchanged.
        """
        info = self.get_command(module, command)
        info.options = list(dict.fromkeys(ordered))
        metadata.write_record(self.command_record_path(module, command), info.to_record())
        return info.options

    def list_commands_using(self, module: str, option: str) -> set[str]:
        """Return the names of every command in *module* whose option list has *option*."""
        return {
            command
            for command in self.list_commands(module)
            if option in self.get_command_options(module, command)
        }

    # ---------- Declarations ----------

    def list_declarations(self, module: str) -> list[str]:
        """Return sorted names of the options declared in *module*."""
        options_dir = self.module_dir(module) / "options"
        if not options_dir.is_dir():
            return []
        return sorted(
            p.name for p in options_dir.iterdir() if p.is_dir() and (p / METADATA).is_file()
        )

    def has_declaration(self, module: str, option: str) -> bool:
        return metadata.exists(self.option_record_path(module, option))

    def get_declaration(self, module: str, option: str) -> OptionDeclaration:
        path = self.option_record_path(module, option)
        if not metadata.exists(path):
            raise OptionNotDeclared(module, option)
        return OptionDeclaration.from_record(metadata.read_record(path), option, path)

    def declare_option(self, module: str, decl: OptionDeclaration) -> bool:
        """Create the declaration record for *decl*.

        Returns True if a record was written, False if an identical
        declaration already existed.  Raises OptionAlreadyDeclared when the
        existing declaration differs.
        """
        if self.has_declaration(module, decl.name):
            existing = self.get_declaration(module, decl.name)
            differing = existing.differing_fields(decl)
            if differing:
                raise OptionAlreadyDeclared(module, decl.name, differing)
            return False
        metadata.write_record(self.option_record_path(module, decl.name), decl.to_record())
        return True

    def undeclare_option(self, module: str, option: str) -> None:
        """Delete the option's declaration directory.

        Does not check whether a command still uses the option; that is the
        caller's job (see ``rerunctl.lib.core.options.remove_option``).
        """
        metadata.delete(self.option_dir(module, option))

    def find_orphans(self, module: str) -> list[str]:
        """Declared options that no command of *module* assigns."""
        assigned: set[str] = set()
        for command in self.list_commands(module):
            assigned.update(self.get_command_options(module, command))
        return [name for name in self.list_declarations(module) if name not in assigned]
