# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Where rerunctl keeps its config (and default modules root) and its debug log."""

import getpass
import os
from collections.abc import Callable
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "rerunctl"


def _is_root() -> bool:
    try:
        return os.geteuid() == 0  # type: ignore[attr-defined]
    except AttributeError:
        return getpass.getuser() == "root"


def _resolve(env_var: str, system_base: str, user_dir: Callable[[str], str]) -> Path:
    """*env_var* if set, else ``<system_base>/rerunctl`` for root, else the platformdirs dir."""
    env = os.getenv(env_var)
    if env:
        return Path(env).expanduser()
    if _is_root():
        return Path(system_base) / APP_NAME
    return Path(user_dir(APP_NAME))


def config_root() -> Path:
    """RERUNCTL_CONFIG_DIR, /etc/rerunctl (root) or ~/.config/rerunctl.

    Holds config.yml and, unless configured otherwise, ``modules/``.
    """
    return _resolve("RERUNCTL_CONFIG_DIR", "/etc", user_config_dir)


def state_root() -> Path:
    """RERUNCTL_STATE_DIR, /var/lib/rerunctl (root) or ~/.local/share/rerunctl."""
    return _resolve("RERUNCTL_STATE_DIR", "/var/lib", user_data_dir)
