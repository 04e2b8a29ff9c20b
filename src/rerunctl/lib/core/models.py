# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Typed module, command and option declaration records.

Each dataclass owns the conversion to and from the flat ``KEY=value``
mapping stored on disk.  Keys a record does not know about are kept in
``extra`` and written back unchanged.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path

from ..errors import MalformedRecord

_TRUE = "true"
_FALSE = "false"


def _parse_bool(record: dict[str, str], key: str, default: bool, path: Path) -> bool:
    raw = record.get(key, "").strip().lower()
    if not raw:
        return default
    if raw == _TRUE:
        return True
    if raw == _FALSE:
        return False
    raise MalformedRecord(path, f"{key} must be true or false, got {raw!r}")


def _format_bool(value: bool) -> str:
    return _TRUE if value else _FALSE


def _split_words(value: str) -> list[str]:
    return value.split()


def _remaining(record: dict[str, str], known: tuple[str, ...]) -> dict[str, str]:
    return {k: v for k, v in record.items() if k not in known}


# ---------- Module ----------

_MODULE_KEYS = ("NAME", "DESCRIPTION", "VERSION", "REQUIRES", "EXTERNALS")


@dataclass
class ModuleInfo:
    name: str
    description: str = ""
    version: str = ""
    requires: list[str] = field(default_factory=list)
    externals: list[str] = field(default_factory=list)
    extra: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: dict[str, str], name: str) -> "ModuleInfo":
        return cls(
            name=record.get("NAME") or name,
            description=record.get("DESCRIPTION", ""),
            version=record.get("VERSION", ""),
            requires=_split_words(record.get("REQUIRES", "")),
            externals=_split_words(record.get("EXTERNALS", "")),
            extra=_remaining(record, _MODULE_KEYS),
        )

    def to_record(self) -> dict[str, str]:
        record = {"NAME": self.name, "DESCRIPTION": self.description}
        if self.version:
            record["VERSION"] = self.version
        if self.requires:
            record["REQUIRES"] = " ".join(self.requires)
        if self.externals:
            record["EXTERNALS"] = " ".join(self.externals)
        record.update(self.extra)
        return record


# ---------- Command ----------

_COMMAND_KEYS = ("NAME", "DESCRIPTION", "OPTIONS")


@dataclass
class CommandInfo:
    name: str
    description: str = ""
    # Assignment order is parse order in the generated options.sh.
    options: list[str] = field(default_factory=list)
    extra: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: dict[str, str], name: str) -> "CommandInfo":
        return cls(
            name=record.get("NAME") or name,
            description=record.get("DESCRIPTION", ""),
            options=_split_words(record.get("OPTIONS", "")),
            extra=_remaining(record, _COMMAND_KEYS),
        )

    def to_record(self) -> dict[str, str]:
        record = {
            "NAME": self.name,
            "DESCRIPTION": self.description,
            "OPTIONS": " ".join(self.options),
        }
        record.update(self.extra)
        return record


# ---------- Option declaration ----------

_OPTION_KEYS = ("NAME", "DESCRIPTION", "ARG", "LONG", "SHORT", "REQUIRED", "EXPORT", "DEFAULT")


@dataclass
class OptionDeclaration:
    """Canonical definition of a flag, owned by a module.

    ``short`` and ``long`` are stored without dashes.  ``arg`` is the arity:
    True consumes one argument, False makes the option a boolean switch.
    An empty ``default`` means there is no default.
    """

    name: str
    description: str = ""
    short: str = ""
    long: str = ""
    default: str = ""
    required: bool = False
    export: bool = False
    arg: bool = True
    extra: dict[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        self.short = self.short.lstrip("-")
        self.long = self.long.lstrip("-") or self.name

    @classmethod
    def from_record(cls, record: dict[str, str], name: str, path: Path) -> "OptionDeclaration":
        return cls(
            name=record.get("NAME") or name,
            description=record.get("DESCRIPTION", ""),
            short=record.get("SHORT", ""),
            long=record.get("LONG", ""),
            default=record.get("DEFAULT", ""),
            required=_parse_bool(record, "REQUIRED", False, path),
            export=_parse_bool(record, "EXPORT", False, path),
            arg=_parse_bool(record, "ARG", True, path),
            extra=_remaining(record, _OPTION_KEYS),
        )

    def to_record(self) -> dict[str, str]:
        record = {
            "NAME": self.name,
            "DESCRIPTION": self.description,
            "ARG": _format_bool(self.arg),
            "LONG": self.long,
            "SHORT": self.short,
            "REQUIRED": _format_bool(self.required),
            "EXPORT": _format_bool(self.export),
            "DEFAULT": self.default,
        }
        record.update(self.extra)
        return record

    def differing_fields(self, other: "OptionDeclaration") -> list[str]:
        """Names of the compared attributes whose values differ from *other*."""
        return [
            f.name
            for f in fields(self)
            if f.compare and getattr(self, f.name) != getattr(other, f.name)
        ]
