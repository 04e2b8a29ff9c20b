# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Informational CLI commands: config overview."""

from __future__ import annotations

import argparse
import os

from ...lib._util.logging_utils import debug_log_path
from ...lib._util.template_utils import TEMPLATE_DIR
from ...lib.core.config import (
    get_option_defaults,
    global_config_path,
    global_config_search_paths,
    modules_root,
    state_root,
)
from ...lib.core.registry import OptionRegistry
from ...ui_utils.terminal import gray as _gray, supports_color as _supports_color, yes_no as _yes_no


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register informational subcommands (config)."""
    subparsers.add_parser("config", help="Show configuration, modules and template paths")


def dispatch(args: argparse.Namespace) -> bool:
    """Handle the config command.  Returns True if handled."""
    if args.cmd == "config":
        _print_config(getattr(args, "modules_dir", None))
        return True
    return False


def _print_config(modules_dir: str | None) -> None:
    """Display configuration, modules root and template paths."""
    color_enabled = _supports_color()
    print("Configuration (read):")
    gcfg = global_config_path()
    print(
        f"- Global config file: {_gray(str(gcfg), color_enabled)} "
        f"(exists: {_yes_no(gcfg.is_file(), color_enabled)})"
    )
    paths = global_config_search_paths()
    if paths:
        print("- Global config search order:")
        for p in paths:
            print(f"  • {_gray(str(p), color_enabled)} (exists: {_yes_no(p.is_file(), color_enabled)})")
    defaults = get_option_defaults()
    print(
        "- add-option defaults: "
        + ", ".join(f"{k}={'true' if v else 'false'}" for k, v in defaults.items())
    )

    root = modules_root(modules_dir)
    print(
        f"- Modules root: {_gray(str(root), color_enabled)} "
        f"(exists: {_yes_no(root.is_dir(), color_enabled)})"
    )
    modules = OptionRegistry(root).list_modules()
    if modules:
        for m in modules:
            print(f"  • {m}")
    else:
        print("  (no modules found)")

    print(f"Templates (read):\n- Package templates dir: {_gray(str(TEMPLATE_DIR), color_enabled)}")

    print("Writable locations (write):")
    print(f"- State root: {_gray(str(state_root()), color_enabled)}")
    log_path = debug_log_path()
    print(
        f"- Debug log: {_gray(str(log_path), color_enabled)} "
        f"(exists: {_yes_no(log_path.is_file(), color_enabled)})"
    )

    print("Environment overrides (if set):")
    for var in (
        "RERUNCTL_MODULES",
        "RERUN_MODULES",
        "RERUNCTL_CONFIG_FILE",
        "RERUNCTL_CONFIG_DIR",
        "RERUNCTL_STATE_DIR",
        "XDG_CONFIG_HOME",
    ):
        val = os.environ.get(var)
        if val is not None:
            print(f"- {var}={_gray(val, color_enabled)}")
