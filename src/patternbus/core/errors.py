# src/patternbus/core/errors.py
from __future__ import annotations

__all__ = ["InvalidArgumentError", "ConfigError"]


class InvalidArgumentError(ValueError):
    """Raised by a strict dispatcher when a pattern, handler or event name is malformed."""


class ConfigError(ValueError):
    """Raised when a dispatcher configuration document cannot be used."""
