import argparse
import os

from patternbus.core import log
from patternbus.core.contracts import Dialect
from patternbus.core.dispatcher import Dispatcher
from patternbus.core.metrics import force_emit


def run_marker(lg):
    disp = Dispatcher(Dialect.MARKER, name="demo.marker")
    disp.register("login", lambda p: lg.info("login payload=%s", p))
    disp.register("starts-with:user-", lambda n, p: lg.info("user event %s payload=%s", n, p))
    disp.register("ends-with:-failed", lambda n, p: lg.warning("failure %s payload=%s", n, p))
    disp.register("*", lambda n, p: lg.info("catch-all saw %s", n))

    disp.emit("login", {"id": 1})
    disp.emit("user-created", 42)
    disp.emit("payment-failed", {"code": 402})
    disp.emit("signup")


def run_wildcard(lg, wildcards: bool):
    disp = Dispatcher(Dialect.WILDCARD, wildcards=wildcards, name="demo.wildcard")
    disp.register("debug", lambda p: lg.info("exact debug payload=%s", p))
    disp.register("debug*", lambda n, p: lg.info("debug* matched %s", n))
    disp.register("*.created", lambda n, p: lg.info("*.created matched %s", n))
    disp.register("*", lambda n, p: lg.info("'*' handler saw %s", n))

    for name in ("debug", "DEBUG-verbose", "order.created", "xdebug"):
        disp.emit(name, {"src": "demo"})


def main():
    ap = argparse.ArgumentParser(description="patternbus dispatch demo")
    ap.add_argument("--no-wildcards", action="store_true", help="disable '*' expansion in the wildcard dialect")
    ap.add_argument("--json", action="store_true", help="JSON log lines")
    args = ap.parse_args()

    os.environ.setdefault("LOG_LEVEL", "INFO")
    log.setup(json_mode=args.json or None)
    lg = log.get("demo")

    lg.info("--- marker-prefixed dialect ---")
    run_marker(lg)
    lg.info("--- inline-wildcard dialect (wildcards=%s) ---", not args.no_wildcards)
    run_wildcard(lg, wildcards=not args.no_wildcards)

    force_emit(logger=log.get("metrics"), json_mode=args.json)


if __name__ == "__main__":
    main()
