# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Interactive option selection.

Supplies the option name for add-option/rm-option when ``--option`` was
not given.  Only the input source differs; the operation called afterwards
is the same.
"""

import sys
from typing import TextIO

from .errors import OptionNotAssigned, UsageError


def _print_menu(choices: list[str], out: TextIO) -> None:
    if not choices:
        print("No options assigned.", file=out)
        return
    print("Assigned options:", file=out)
    for i, name in enumerate(choices, 1):
        print(f"  {i}) {name}", file=out)


def read_option_name(
    stream: TextIO,
    *,
    prompt: str = "Option",
    choices: list[str] | None = None,
    out: TextIO | None = None,
    module: str = "",
    command: str = "",
) -> str:
    """Read one option name per line from *stream*.

    Blank lines are skipped.  With *choices*, the list is shown first and
    the answer may be a name or its 1-based menu number; anything else
    raises OptionNotAssigned.  EOF before a name raises UsageError.
    """
    out = out if out is not None else sys.stderr
    if choices is not None:
        _print_menu(choices, out)
    print(f"{prompt}: ", end="", file=out, flush=True)

    for line in stream:
        answer = line.strip()
        if not answer:
            continue
        if choices is None:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return choices[int(answer) - 1]
        if answer in choices:
            return answer
        raise OptionNotAssigned(module, command, answer)

    raise UsageError("no option selected (end of input)", module=module, command=command)
