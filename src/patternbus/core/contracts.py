from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

__all__ = [
    "Dialect",
    "Event",
    "DispatcherConfig",
]


class Dialect(str, Enum):
    """Pattern dialect a dispatcher understands. Never mixed in one instance."""
    MARKER = "marker"        # starts-with:/ends-with: prefixed patterns
    WILDCARD = "wildcard"    # glob-style '*' inside the pattern

    @classmethod
    def parse(cls, value: Union["Dialect", str]) -> "Dialect":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"unknown dialect: {value!r}")
        key = value.strip().lower()
        aliases = {
            "marker": cls.MARKER,
            "marker-prefixed": cls.MARKER,
            "wildcard": cls.WILDCARD,
            "inline-wildcard": cls.WILDCARD,
        }
        try:
            return aliases[key]
        except KeyError:
            raise ValueError(f"unknown dialect: {value!r}") from None


# --------- Ephemeral emit envelope ---------
@dataclass(slots=True, frozen=True)
class Event:
    """An emitted (name, payload) pair. Consumed during emit, never stored."""
    name: str
    payload: Any = None


@dataclass(slots=True)
class DispatcherConfig:
    dialect: Dialect = Dialect.MARKER
    wildcards: bool = True       # only meaningful for Dialect.WILDCARD
    strict: bool = False         # raise InvalidArgumentError instead of ignoring bad input
    thread_safe: bool = False    # guard tables with an RLock
    name: str = "dispatcher"

    def __post_init__(self):
        self.dialect = Dialect.parse(self.dialect)
