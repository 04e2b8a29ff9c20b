# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Subcommand modules of the rerunctl CLI.

``register(subparsers)`` adds a module's parsers; ``dispatch(args)``
runs the parsed command and returns False when it is not one of its own.
"""
