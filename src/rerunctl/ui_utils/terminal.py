"""ANSI coloring for the plain-print CLI output (config, add/rm-option).

The list-options table goes through rich instead and does not use these.
"""

import os
import sys


def supports_color() -> bool:
    """True when stdout should get ANSI colors.

    ``NO_COLOR`` disables, ``FORCE_COLOR`` (other than ``"0"``) enables,
    otherwise colors are used only on a TTY.
    """
    if "NO_COLOR" in os.environ:
        return False
    force = os.environ.get("FORCE_COLOR")
    if force is not None and force != "0":
        return True
    return sys.stdout.isatty()


def color(text: str, code: str, enabled: bool) -> str:
    """Wrap *text* in SGR *code* if *enabled*, else return it unchanged."""
    if not enabled:
        return text
    return f"\x1b[{code}m{text}\x1b[0m"


def green(text: str, enabled: bool) -> str:
    return color(text, "32", enabled)


def yellow(text: str, enabled: bool) -> str:
    return color(text, "33", enabled)


def gray(text: str, enabled: bool) -> str:
    return color(text, "90", enabled)


def yes_no(value: bool, enabled: bool) -> str:
    """``yes`` in green or ``no`` in red."""
    return color("yes" if value else "no", "32" if value else "31", enabled)
