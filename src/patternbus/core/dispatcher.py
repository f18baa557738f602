# src/patternbus/core/dispatcher.py
from __future__ import annotations

import threading
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Dict, List, Optional, Union

from patternbus.core import log
from patternbus.core.contracts import Dialect, DispatcherConfig, Event
from patternbus.core.errors import InvalidArgumentError
from patternbus.core.metrics import Timer, inc_counter
from patternbus.core.patterns import CATCH_ALL, Exact, Pattern, compile_pattern

# exact handlers get (payload); pattern and catch-all handlers get (event_name, payload)
Handler = Callable[..., Any]


@dataclass(slots=True)
class _Route:
    pattern: Pattern
    handler: Handler


class Dispatcher:
    """
    Synchronous pattern dispatcher.

    emit(name, payload) runs, in order:
      1. the exact handler for `name`             -> handler(payload)
      2. every matching pattern handler          -> handler(name, payload)
      3. the '*' catch-all, unless the instance is
         in the wildcard dialect with wildcards on -> handler(name, payload)

    Handler exceptions propagate to the emit caller and stop that emit.
    """

    def __init__(
        self,
        dialect: Union[Dialect, str] = Dialect.MARKER,
        *,
        wildcards: bool = True,
        strict: bool = False,
        thread_safe: bool = False,
        name: str = "dispatcher",
    ):
        self.dialect = Dialect.parse(dialect)
        self.wildcards = bool(wildcards)
        self.strict = bool(strict)
        self.name = name
        self.l = log.get(name)
        self._exact: Dict[str, Handler] = {}
        self._patterns: Dict[str, _Route] = {}
        self._lock: Optional[threading.RLock] = threading.RLock() if thread_safe else None

    @classmethod
    def from_config(cls, cfg: DispatcherConfig) -> "Dispatcher":
        return cls(
            cfg.dialect,
            wildcards=cfg.wildcards,
            strict=cfg.strict,
            thread_safe=cfg.thread_safe,
            name=cfg.name,
        )

    @property
    def catch_all_enabled(self) -> bool:
        return self.dialect is Dialect.MARKER or not self.wildcards

    def _guard(self) -> ContextManager[Any]:
        return self._lock if self._lock is not None else nullcontext()

    def _reject(self, msg: str, *args: Any) -> None:
        if self.strict:
            raise InvalidArgumentError(msg % args)
        self.l.debug("ignored: " + msg, *args)

    # -------------------- registration --------------------
    def register(self, pattern: str, handler: Handler) -> None:
        if not isinstance(pattern, str) or not pattern:
            self._reject("pattern must be a non-empty string, got %r", pattern)
            return
        if not callable(handler):
            self._reject("handler for %r is not callable: %r", pattern, handler)
            return

        compiled = compile_pattern(pattern, self.dialect, self.wildcards)
        with self._guard():
            if isinstance(compiled, Exact):
                replaced = pattern in self._exact
                self._exact[pattern] = handler
            else:
                replaced = pattern in self._patterns
                self._patterns[pattern] = _Route(compiled, handler)

        if replaced:
            self.l.debug("replaced handler pattern=%s", pattern)
        else:
            self.l.debug("registered %s pattern=%s fn=%s",
                         type(compiled).__name__.lower(), pattern, getattr(handler, "__name__", repr(handler)))

    on = register

    def unregister(self, pattern: str) -> None:
        if not isinstance(pattern, str):
            self._reject("pattern must be a string, got %r", pattern)
            return
        with self._guard():
            removed = self._exact.pop(pattern, None) is not None
            removed = self._patterns.pop(pattern, None) is not None or removed
        if removed:
            self.l.debug("unregistered pattern=%s", pattern)

    off = unregister

    def clear(self) -> None:
        with self._guard():
            self._exact.clear()
            self._patterns.clear()

    # -------------------- dispatch --------------------
    def emit(self, event_name: str, payload: Any = None) -> None:
        if not isinstance(event_name, str) or not event_name:
            self._reject("event name must be a non-empty string, got %r", event_name)
            return

        # handlers may (un)register during emit; they see the change next time
        with self._guard():
            exact = self._exact.get(event_name)
            routes = list(self._patterns.values())
            catch_all = self._exact.get(CATCH_ALL) if self.catch_all_enabled else None

        inc_counter("dispatch_emit_total", dispatcher=self.name)
        with Timer("dispatch_emit_ms", dispatcher=self.name):
            if exact is not None:
                inc_counter("dispatch_deliver_total", dispatcher=self.name, kind="exact")
                exact(payload)

            for route in routes:
                if route.pattern.matches(event_name):
                    inc_counter("dispatch_deliver_total", dispatcher=self.name, kind="pattern")
                    route.handler(event_name, payload)

            if catch_all is not None:
                inc_counter("dispatch_deliver_total", dispatcher=self.name, kind="catch_all")
                catch_all(event_name, payload)

    def emit_event(self, ev: Event) -> None:
        self.emit(ev.name, ev.payload)

    # -------------------- introspection --------------------
    def patterns(self) -> List[str]:
        """Registered pattern strings, exact ones first, each in registration order."""
        with self._guard():
            return list(self._exact) + list(self._patterns)

    def __contains__(self, pattern: object) -> bool:
        with self._guard():
            return pattern in self._exact or pattern in self._patterns

    def __len__(self) -> int:
        with self._guard():
            return len(self._exact) + len(self._patterns)

    def __repr__(self) -> str:
        return (f"Dispatcher(name={self.name!r}, dialect={self.dialect.value!r}, "
                f"wildcards={self.wildcards}, handlers={len(self)})")
