# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Flat ``KEY=value`` metadata records on disk.

Records are sourceable shell assignment files (``NAME=freddy``,
``DESCRIPTION='a module'``, ``OPTIONS='jumps height'``).  This module is
the only place that sees them as text; everything above it works with the
typed records from :mod:`rerunctl.lib.core.models`.
"""

import re
import shlex
from collections.abc import Mapping
from pathlib import Path

from .._util.fs import atomic_write_text, remove_path
from ..errors import MalformedRecord

_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _strip_comments(text: str) -> str:
    """Drop ``#`` comments the way bash does.

    ``#`` starts a comment only at the beginning of a word and outside
    quotes; ``DEFAULT=a#b`` keeps its ``#``.  shlex would cut it anywhere.
    """
    out = []
    quote = ""
    escaped = False
    in_comment = False
    word_start = True
    for ch in text:
        if in_comment:
            if ch != "\n":
                continue
            in_comment = False
            word_start = True
        elif escaped:
            escaped = False
            word_start = False
        elif quote:
            if ch == quote:
                quote = ""
            elif ch == "\\" and quote == '"':
                escaped = True
            word_start = False
        elif ch == "#" and word_start:
            in_comment = True
            continue
        else:
            if ch == "\\":
                escaped = True
            elif ch in "'\"":
                quote = ch
            word_start = ch.isspace()
        out.append(ch)
    return "".join(out)


def parse_record(text: str, path: Path) -> dict[str, str]:
    """Parse record *text* into a dict.  *path* is only used in errors.

    Values may be single or double quoted, may be empty and may span lines
    inside quotes.  Blank lines and ``#`` comments are skipped.  A later
    assignment to the same key wins, as it would when sourced.
    """
    lexer = shlex.shlex(_strip_comments(text), posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        tokens = list(lexer)
    except ValueError as exc:
        raise MalformedRecord(path, str(exc)) from exc

    record: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not _KEY_RE.match(key):
            raise MalformedRecord(path, f"not a KEY=value assignment: {token!r}")
        record[key] = value
    return record


def format_record(mapping: Mapping[str, str], path: Path) -> str:
    """Render *mapping* as one ``KEY=value`` line per entry, in mapping order."""
    lines = []
    for key, value in mapping.items():
        if not isinstance(key, str) or not _KEY_RE.match(key):
            raise MalformedRecord(path, f"invalid key: {key!r}")
        value = str(value)
        lines.append(f"{key}={shlex.quote(value)}" if value else f"{key}=")
    return "\n".join(lines) + "\n" if lines else ""


def read_record(path: Path) -> dict[str, str]:
    """Read and parse the record at *path*.

    Raises MalformedRecord for unparseable content and for any filesystem
    error (missing file, permissions), with the ``OSError`` as cause.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedRecord(path, exc.strerror or str(exc)) from exc
    return parse_record(text, path)


def write_record(path: Path, mapping: Mapping[str, str]) -> None:
    """Atomically replace the record at *path* with *mapping*.

    Parent directories are created as needed.
    """
    content = format_record(mapping, path)
    try:
        atomic_write_text(path, content)
    except OSError as exc:
        raise MalformedRecord(path, exc.strerror or str(exc)) from exc


def exists(path: Path) -> bool:
    return path.exists()


def delete(path: Path) -> None:
    """Remove a record file or a whole record directory.  No-op when absent."""
    try:
        remove_path(path)
    except OSError as exc:
        raise MalformedRecord(path, exc.strerror or str(exc)) from exc
