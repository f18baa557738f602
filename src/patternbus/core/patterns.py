# src/patternbus/core/patterns.py
"""
Registration patterns, parsed once at register() time and stored as data.

    Exact("login")          -> literal name (also the '*' catch-all)
    Prefix("debug")         -> from "starts-with:debug"
    Suffix("verbose")       -> from "ends-with:verbose"
    Wildcard("debug*", re)  -> from "debug*" in the inline-wildcard dialect
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

from patternbus.core.contracts import Dialect

__all__ = [
    "STARTS_WITH",
    "ENDS_WITH",
    "CATCH_ALL",
    "Exact",
    "Prefix",
    "Suffix",
    "Wildcard",
    "Pattern",
    "compile_pattern",
    "wildcard_regex",
]

STARTS_WITH = "starts-with:"
ENDS_WITH = "ends-with:"
CATCH_ALL = "*"


@dataclass(slots=True, frozen=True)
class Exact:
    name: str

    @property
    def raw(self) -> str:
        return self.name

    def matches(self, event_name: str) -> bool:
        return event_name == self.name


@dataclass(slots=True, frozen=True)
class Prefix:
    prefix: str

    @property
    def raw(self) -> str:
        return STARTS_WITH + self.prefix

    def matches(self, event_name: str) -> bool:
        return event_name.startswith(self.prefix)


@dataclass(slots=True, frozen=True)
class Suffix:
    suffix: str

    @property
    def raw(self) -> str:
        return ENDS_WITH + self.suffix

    def matches(self, event_name: str) -> bool:
        return event_name.endswith(self.suffix)


@dataclass(slots=True, frozen=True)
class Wildcard:
    source: str
    regex: re.Pattern[str] = field(compare=False, repr=False)

    @property
    def raw(self) -> str:
        return self.source

    def matches(self, event_name: str) -> bool:
        return self.regex.fullmatch(event_name) is not None


Pattern = Union[Exact, Prefix, Suffix, Wildcard]


def wildcard_regex(source: str) -> re.Pattern[str]:
    """'*' -> '.*', everything else literal; anchored, case-insensitive."""
    body = ".*".join(re.escape(part) for part in source.split("*"))
    return re.compile(f"^{body}$", re.IGNORECASE | re.DOTALL)


def compile_pattern(raw: str, dialect: Dialect, wildcards: bool = True) -> Pattern:
    if dialect is Dialect.MARKER:
        if raw.startswith(STARTS_WITH):
            return Prefix(raw[len(STARTS_WITH):])
        if raw.startswith(ENDS_WITH):
            return Suffix(raw[len(ENDS_WITH):])
        return Exact(raw)

    if wildcards and "*" in raw:
        return Wildcard(raw, wildcard_regex(raw))
    return Exact(raw)
