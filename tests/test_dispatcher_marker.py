# tests/test_dispatcher_marker.py
import pytest

from patternbus.core.contracts import Dialect, Event
from patternbus.core.dispatcher import Dispatcher


@pytest.fixture
def disp():
    return Dispatcher(Dialect.MARKER, name="test.marker")


def test_exact_handler_gets_payload_only(disp, rec):
    h = rec("h")
    disp.register("login", h)

    disp.emit("login", {"id": 1})
    disp.emit("logout", {"id": 1})

    assert h.calls == [({"id": 1},)]


def test_payload_defaults_to_none(disp, rec):
    h = rec()
    disp.register("ping", h)
    disp.emit("ping")
    assert h.calls == [(None,)]


def test_starts_with(disp, rec):
    h = rec()
    disp.register("starts-with:debug", h)

    disp.emit("debug-verbose", "p")
    disp.emit("debug", "q")
    disp.emit("production", "r")

    assert h.calls == [("debug-verbose", "p"), ("debug", "q")]


def test_ends_with(disp, rec):
    h = rec()
    disp.register("ends-with:verbose", h)

    disp.emit("debug-verbose", 1)
    disp.emit("debug", 2)

    assert h.calls == [("debug-verbose", 1)]


def test_marker_matching_is_case_sensitive_and_literal(disp, rec):
    h = rec()
    disp.register("starts-with:a*", h)

    disp.emit("abc")
    disp.emit("A*b")
    disp.emit("a*b", 7)

    assert h.calls == [("a*b", 7)]


def test_starts_with_marker_is_not_an_exact_key(disp, rec):
    h = rec()
    disp.register("starts-with:x", h)
    disp.emit("starts-with:x", 1)
    # "starts-with:x" does not itself start with "x"
    assert h.calls == []

    disp.emit("x1", 2)
    assert h.calls == [("x1", 2)]


def test_catch_all_fires_for_unrelated_name(disp, rec):
    c = rec()
    disp.register("*", c)
    disp.emit("foo", 5)
    assert c.calls == [("foo", 5)]


def test_literal_star_emit_hits_exact_and_catch_all(disp, rec):
    c = rec()
    disp.register("*", c)
    disp.emit("*", 9)
    assert c.calls == [(9,), ("*", 9)]


def test_dispatch_order_exact_then_patterns_then_catch_all(disp):
    order = []
    disp.register("*", lambda n, p: order.append("catch_all"))
    disp.register("ends-with:-created", lambda n, p: order.append("suffix"))
    disp.register("user-created", lambda p: order.append("exact"))
    disp.register("starts-with:user", lambda n, p: order.append("prefix"))

    disp.emit("user-created")

    assert order == ["exact", "suffix", "prefix", "catch_all"]


def test_end_to_end_login_user_signup(disp, rec):
    a, b, c = rec("a"), rec("b"), rec("c")
    disp.register("login", a)
    disp.register("starts-with:user-", b)
    disp.register("*", c)

    disp.emit("login", {"id": 1})
    assert a.calls == [({"id": 1},)]
    assert b.calls == []

    disp.emit("user-created", 42)
    assert b.calls == [("user-created", 42)]

    disp.emit("signup", 42)
    assert a.calls == [({"id": 1},)]
    assert b.calls == [("user-created", 42)]
    # the catch-all runs on every emit, independent of earlier matches
    assert c.calls == [("login", {"id": 1}), ("user-created", 42), ("signup", 42)]


def test_register_replaces_previous_handler(disp, rec):
    first, second = rec("first"), rec("second")
    disp.register("evt", first)
    disp.register("evt", second)

    disp.emit("evt", 1)

    assert first.calls == []
    assert second.calls == [(1,)]
    assert len(disp) == 1


def test_replacing_pattern_handler(disp, rec):
    first, second = rec("first"), rec("second")
    disp.register("ends-with:x", first)
    disp.register("ends-with:x", second)
    disp.emit("box")
    assert first.calls == []
    assert second.calls == [("box", None)]


def test_unregister_is_idempotent(disp, rec):
    keep, gone = rec("keep"), rec("gone")
    disp.register("keep", keep)
    disp.register("starts-with:g", gone)

    disp.unregister("starts-with:g")
    disp.unregister("starts-with:g")
    disp.unregister("never-registered")

    disp.emit("keep", 1)
    disp.emit("gone", 2)

    assert keep.calls == [(1,)]
    assert gone.calls == []
    assert disp.patterns() == ["keep"]


def test_on_off_aliases(disp, rec):
    h = rec()
    disp.on("x", h)
    disp.emit("x", 1)
    disp.off("x")
    disp.emit("x", 2)
    assert h.calls == [(1,)]


def test_emit_event_envelope(disp, rec):
    h = rec()
    disp.register("starts-with:job.", h)
    disp.emit_event(Event("job.done", {"ok": True}))
    assert h.calls == [("job.done", {"ok": True})]


def test_introspection_and_clear(disp):
    disp.register("b", lambda p: None)
    disp.register("starts-with:a", lambda n, p: None)
    disp.register("a", lambda p: None)

    assert disp.patterns() == ["b", "a", "starts-with:a"]
    assert "starts-with:a" in disp
    assert "starts-with:z" not in disp
    assert len(disp) == 3

    disp.clear()
    assert len(disp) == 0
    assert disp.patterns() == []


def test_instances_are_independent(rec):
    h = rec()
    one = Dispatcher(name="one")
    two = Dispatcher(name="two")
    one.register("e", h)
    two.emit("e", 1)
    assert h.calls == []
