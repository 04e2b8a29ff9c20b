# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy for rerunctl.

Every error names the module/command/option it is about so the CLI can
print one diagnostic line and exit non-zero.
"""

from pathlib import Path


class RerunctlError(Exception):
    """Base exception for option subsystem failures."""

    def __init__(
        self,
        message: str,
        *,
        module: str | None = None,
        command: str | None = None,
        option: str | None = None,
    ) -> None:
        super().__init__(message)
        self.module = module
        self.command = command
        self.option = option


class UsageError(RerunctlError):
    """Bad or missing user input (e.g. nothing selected at the prompt)."""


class FlagCollision(UsageError):
    """An option's flag or variable is already taken by another option of the command."""

    def __init__(self, module: str, command: str, option: str, problems: list[str]) -> None:
        self.problems = problems
        super().__init__(
            f"cannot assign {option} to {module}:{command}: {'; '.join(problems)}",
            module=module,
            command=command,
            option=option,
        )


class ModuleNotFound(RerunctlError):
    """The module directory or its metadata record does not exist."""

    def __init__(self, module: str) -> None:
        super().__init__(f"module not found: {module}", module=module)


class CommandNotFound(RerunctlError):
    """The command's metadata record does not exist."""

    def __init__(self, module: str, command: str) -> None:
        super().__init__(f"command not found: {module}:{command}", module=module, command=command)


class OptionNotDeclared(RerunctlError):
    """No declaration record for the option exists in the module."""

    def __init__(self, module: str, option: str) -> None:
        super().__init__(
            f"option not declared in module {module}: {option}", module=module, option=option
        )


class OptionNotAssigned(RerunctlError):
    """The option is not in the command's option list."""

    def __init__(self, module: str, command: str, option: str) -> None:
        super().__init__(
            f"option not assigned to {module}:{command}: {option}",
            module=module,
            command=command,
            option=option,
        )


class OptionAlreadyDeclared(RerunctlError):
    """A declaration with the same name but different attributes exists."""

    def __init__(self, module: str, option: str, differing: list[str]) -> None:
        self.differing = differing
        super().__init__(
            f"option already declared in module {module} with different "
            f"{', '.join(differing)}: {option}",
            module=module,
            option=option,
        )


class OptionConflict(OptionAlreadyDeclared):
    """add-option was asked to reuse a declaration with different attributes."""

    def __init__(self, module: str, command: str, option: str, differing: list[str]) -> None:
        super().__init__(module, option, differing)
        self.command = command


class MalformedRecord(RerunctlError):
    """A metadata record could not be read, parsed or written.

    Filesystem errors are reported as this class with the original
    ``OSError`` chained as ``__cause__``.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"malformed record {path}: {reason}")
