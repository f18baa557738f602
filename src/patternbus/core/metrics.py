from __future__ import annotations

import logging
import threading
import time
from collections import deque
from statistics import mean
from typing import Any, Deque, Dict, List, Optional, Tuple

LabelKey = Tuple[Tuple[str, str], ...]
MetricKey = Tuple[str, LabelKey]


def _labels_key(labels: Dict[str, Any] | None) -> LabelKey:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _pct(sorted_vals: List[float], q: float) -> float:
    if not sorted_vals:
        return 0.0
    idx = max(0, min(len(sorted_vals) - 1, int(round((len(sorted_vals) - 1) * q))))
    return sorted_vals[idx]


# ---------------- Metric types ----------------

class Counter:
    def __init__(self, name: str, labels: LabelKey):
        self.name = name
        self.labels = labels
        self._value = 0.0
        self._lock = threading.Lock()

    def inc(self, n: float = 1.0) -> None:
        with self._lock:
            self._value += n

    def value(self) -> float:
        with self._lock:
            return self._value


class Histogram:
    def __init__(self, name: str, labels: LabelKey, maxlen: int = 2048):
        self.name = name
        self.labels = labels
        self._values: Deque[float] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def observe(self, v: float) -> None:
        with self._lock:
            self._values.append(float(v))

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            vals = sorted(self._values)
        if not vals:
            return {"count": 0.0, "min": 0.0, "max": 0.0, "mean": 0.0, "p50": 0.0, "p99": 0.0}
        return {
            "count": float(len(vals)),
            "min": vals[0],
            "max": vals[-1],
            "mean": mean(vals),
            "p50": _pct(vals, 0.50),
            "p99": _pct(vals, 0.99),
        }


# ---------------- Registry ----------------

class _Registry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._counters: Dict[MetricKey, Counter] = {}
        self._hists: Dict[MetricKey, Histogram] = {}

    def counter(self, name: str, labels: Dict[str, Any] | None) -> Counter:
        key = (name, _labels_key(labels))
        with self._lock:
            m = self._counters.get(key)
            if m is None:
                m = self._counters[key] = Counter(name, key[1])
            return m

    def hist(self, name: str, labels: Dict[str, Any] | None) -> Histogram:
        key = (name, _labels_key(labels))
        with self._lock:
            m = self._hists.get(key)
            if m is None:
                m = self._hists[key] = Histogram(name, key[1])
            return m

    def find_counter(self, name: str, labels: Dict[str, Any] | None) -> Optional[Counter]:
        with self._lock:
            return self._counters.get((name, _labels_key(labels)))

    def items(self):
        with self._lock:
            return list(self._counters.values()), list(self._hists.values())

    def clear(self) -> None:
        with self._lock:
            self._counters.clear()
            self._hists.clear()


_REG = _Registry()


def inc_counter(name: str, n: float = 1.0, **labels: Any) -> None:
    _REG.counter(name, labels).inc(n)


def observe_hist(name: str, v: float, **labels: Any) -> None:
    _REG.hist(name, labels).observe(v)


def counter_value(name: str, **labels: Any) -> float:
    """Current value of one counter (0.0 if it was never incremented)."""
    m = _REG.find_counter(name, labels)
    return 0.0 if m is None else m.value()


def snapshot_all() -> dict:
    counters, hists = _REG.items()
    return {
        "counters": [{"name": m.name, "labels": dict(m.labels), "value": m.value()} for m in counters],
        "hists": [{"name": m.name, "labels": dict(m.labels), **m.snapshot()} for m in hists],
    }


def reset() -> None:
    """Drop every metric (tests)."""
    _REG.clear()


class Timer:
    """Context manager reporting elapsed milliseconds into a histogram."""
    def __init__(self, hist_name: str, **labels: Any) -> None:
        self.hist_name = hist_name
        self.labels = labels
        self._t0 = 0.0

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        # failed emits are not timed
        if exc_type is None:
            observe_hist(self.hist_name, (time.perf_counter() - self._t0) * 1000.0, **self.labels)
        return False


# ---------------- Exporter (log every N seconds) ----------------

class _Exporter(threading.Thread):
    def __init__(self, interval_sec: float = 5.0, json_mode: bool = False, logger: Optional[logging.Logger] = None):
        super().__init__(name="patternbus-metrics", daemon=True)
        self.interval = float(interval_sec)
        self.json_mode = bool(json_mode)
        self.log = logger or logging.getLogger("patternbus.metrics")
        self._stop_evt = threading.Event()

    def run(self) -> None:
        while not self._stop_evt.is_set():
            self.emit_snapshot()
            self._stop_evt.wait(max(0.1, self.interval))

    def stop(self, timeout: float = 1.0) -> None:
        self._stop_evt.set()
        self.join(timeout=timeout)

    def emit_snapshot(self) -> None:
        snap = snapshot_all()
        if self.json_mode:
            for c in snap["counters"]:
                self.log.info({"type": "counter", **c})
            for h in snap["hists"]:
                self.log.info({"type": "hist", **h})
            return
        for c in snap["counters"]:
            self.log.info(f"[ctr] {c['name']} {c['labels']} value={c['value']:.0f}")
        for h in snap["hists"]:
            self.log.info(
                f"[hist] {h['name']} {h['labels']} n={int(h['count'])} "
                f"min={h['min']:.3f} p50={h['p50']:.3f} p99={h['p99']:.3f} max={h['max']:.3f}"
            )


_EXPORTER: Optional[_Exporter] = None


def start_exporter(interval_sec: float = 5.0, json_mode: bool = False, logger: Optional[logging.Logger] = None) -> None:
    global _EXPORTER
    if _EXPORTER is not None:
        return
    _EXPORTER = _Exporter(interval_sec=interval_sec, json_mode=json_mode, logger=logger)
    _EXPORTER.start()


def stop_exporter(timeout: float = 1.0) -> None:
    global _EXPORTER
    if _EXPORTER is not None:
        _EXPORTER.stop(timeout=timeout)
        _EXPORTER = None


def force_emit(logger: Optional[logging.Logger] = None, json_mode: bool = False) -> None:
    """Log a snapshot right now, without the exporter thread."""
    _Exporter(json_mode=json_mode, logger=logger).emit_snapshot()
