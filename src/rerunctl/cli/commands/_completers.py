# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""argcomplete completers for module, command and option names."""

from __future__ import annotations

import argparse
from collections.abc import Callable
from typing import Any

from ...lib.core.config import modules_root
from ...lib.core.registry import OptionRegistry


def _registry(parsed_args: argparse.Namespace) -> OptionRegistry:
    return OptionRegistry(modules_root(getattr(parsed_args, "modules_dir", None)))


def _filter(names: list[str], prefix: str) -> list[str]:
    return [n for n in names if n.startswith(prefix)] if prefix else names


def complete_modules(
    prefix: str, parsed_args: argparse.Namespace, **kwargs: object
) -> list[str]:  # pragma: no cover
    """Return module names matching *prefix*."""
    try:
        return _filter(_registry(parsed_args).list_modules(), prefix)
    except Exception:
        return []


def complete_commands(
    prefix: str, parsed_args: argparse.Namespace, **kwargs: object
) -> list[str]:  # pragma: no cover
    """Return command names of the already-given ``--module`` matching *prefix*."""
    module = getattr(parsed_args, "module", None)
    if not module:
        return []
    try:
        return _filter(_registry(parsed_args).list_commands(module), prefix)
    except Exception:
        return []


def complete_assigned_options(
    prefix: str, parsed_args: argparse.Namespace, **kwargs: object
) -> list[str]:  # pragma: no cover
    """Return options assigned to ``--module``/``--command`` matching *prefix*."""
    module = getattr(parsed_args, "module", None)
    command = getattr(parsed_args, "command", None)
    if not module or not command:
        return []
    try:
        return _filter(_registry(parsed_args).get_command_options(module, command), prefix)
    except Exception:
        return []


def set_completer(action: argparse.Action, fn: Callable[..., Any]) -> None:
    """Attach an argcomplete completer to *action*."""
    action.completer = fn  # type: ignore[attr-defined]
