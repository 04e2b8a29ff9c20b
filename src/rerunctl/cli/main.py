#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import argparse

import argcomplete

from .. import __version__
from ..lib.errors import RerunctlError
from .commands import info, option

_COMMAND_MODULES = (option, info)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rerunctl",
        description="Manage the options of rerun module commands and their generated parsers",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-M",
        "--modules-dir",
        dest="modules_dir",
        help="Modules root directory (default: $RERUNCTL_MODULES, $RERUN_MODULES, config)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)
    for mod in _COMMAND_MODULES:
        mod.register(sub)
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)

    try:
        for mod in _COMMAND_MODULES:
            if mod.dispatch(args):
                return
    except RerunctlError as e:
        raise SystemExit(f"rerunctl: {e}")
    parser.error("Unknown command")


if __name__ == "__main__":
    main()
