# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""rerunctl package.

Modules:
- rerunctl.cli: CLI entry point package (rerunctl)
- rerunctl.lib.core: Metadata store, typed records, option registry, add/remove operations
- rerunctl.lib.codegen: Option parser generation (descriptors + bash renderer)
- rerunctl.lib._util: Internal helpers (fs, templates, logging)
- rerunctl.ui_utils: Terminal formatting helpers
"""

__all__ = [
    "cli",
    "lib",
    "ui_utils",
]

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rerunctl")
except PackageNotFoundError:
    # Running from a source checkout without an install.
    __version__ = "unknown"
