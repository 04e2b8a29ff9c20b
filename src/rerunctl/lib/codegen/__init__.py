# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Option parser generation.

``descriptors`` turns option declarations into typed flag branches;
``bash`` renders those branches into a sourceable ``options.sh``.
"""

from .bash import BashRenderer, render_options_script
from .descriptors import FlagBranch, build_branches, find_collisions, shell_var_name

__all__ = [
    "BashRenderer",
    "FlagBranch",
    "build_branches",
    "find_collisions",
    "render_options_script",
    "shell_var_name",
]
