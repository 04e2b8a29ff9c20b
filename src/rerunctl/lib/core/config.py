# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Global ``config.yml`` lookup and the settings read from it.

Example::

    paths:
      modules_dir: ~/rerun-modules
    defaults:
      required: false
      export: false
      arg: true
"""

import os
import sys
from pathlib import Path
from typing import Any

import yaml  # pip install pyyaml

from .paths import APP_NAME, config_root as _config_root_base, state_root as _state_root_base

CONFIG_NAME = "config.yml"

# ---------- Global config ----------


def global_config_search_paths() -> list[Path]:
    """Candidate config files, most specific first.

    RERUNCTL_CONFIG_FILE replaces the whole list.  Otherwise the XDG user
    config, then ``sys.prefix/etc`` (venv installs), then ``/etc``.
    """
    env_file = os.environ.get("RERUNCTL_CONFIG_FILE")
    if env_file:
        return [Path(env_file).expanduser().resolve()]

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    user_base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return [
        user_base / APP_NAME / CONFIG_NAME,
        Path(sys.prefix) / "etc" / APP_NAME / CONFIG_NAME,
        Path("/etc") / APP_NAME / CONFIG_NAME,
    ]


def global_config_path() -> Path:
    """The config file in use: the first existing candidate.

    An explicit RERUNCTL_CONFIG_FILE is returned even when missing; with no
    candidate present the ``/etc`` path is returned.
    """
    candidates = global_config_search_paths()
    if len(candidates) == 1:
        return candidates[0]
    return next((c.resolve() for c in candidates if c.is_file()), candidates[-1])


def load_global_config() -> dict[str, Any]:
    """Parsed config file, ``{}`` when there is none.  Invalid YAML is fatal."""
    cfg_path = global_config_path()
    if not cfg_path.is_file():
        return {}
    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise SystemExit(f"Failed to parse global config ({cfg_path}): {exc}")
    if not isinstance(data, dict):
        raise SystemExit(f"Global config must be a mapping: {cfg_path}")
    return data


def get_global_section(key: str) -> dict[str, Any]:
    """Top-level section *key*; ``{}`` when missing or not a mapping."""
    value = load_global_config().get(key)
    return value if isinstance(value, dict) else {}


# ---------- Path resolution ----------


def state_root() -> Path:
    """Writable state directory.  See rerunctl.lib.core.paths.state_root()."""
    return _state_root_base().resolve()


def modules_root(override: str | Path | None = None) -> Path:
    """Directory holding ``<module>/metadata`` trees.

    Precedence:
    - Explicit *override* (the ``--modules-dir`` CLI flag)
    - RERUNCTL_MODULES, then RERUN_MODULES (what rerun itself exports)
    - Global config: paths.modules_dir
    - <config_root>/modules
    """
    if override:
        return Path(override).expanduser().resolve()

    for env_var in ("RERUNCTL_MODULES", "RERUN_MODULES"):
        env = os.environ.get(env_var)
        if env:
            return Path(env).expanduser().resolve()

    val = get_global_section("paths").get("modules_dir")
    if val:
        return Path(str(val)).expanduser().resolve()

    return (_config_root_base() / "modules").resolve()


# ---------- add-option defaults ----------

_OPTION_DEFAULTS = {"required": False, "export": False, "arg": True}


def get_option_defaults() -> dict[str, bool]:
    """Values for add-option's ``--required/--export/--arg`` when not given.

    Booleans under ``defaults:`` override the built-in values; anything
    else there is ignored.
    """
    section = get_global_section("defaults")
    return {
        key: section[key] if isinstance(section.get(key), bool) else builtin
        for key, builtin in _OPTION_DEFAULTS.items()
    }
