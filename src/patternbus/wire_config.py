# src/patternbus/wire_config.py
"""
Build a Dispatcher from a YAML document, with environment overrides.

    dispatcher:
      dialect: wildcard          # marker | wildcard
      wildcards: true
      strict: false
      thread_safe: false
      name: app.bus
    handlers:
      - pattern: "user.*"
        module: myapp.audit
        func: on_user_event
"""
from __future__ import annotations

import importlib
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from patternbus.core.log import get as get_logger
from patternbus.core.contracts import Dialect, DispatcherConfig
from patternbus.core.dispatcher import Dispatcher
from patternbus.core.errors import ConfigError

log = get_logger(__name__)

ENV_PREFIX = "PATTERNBUS_"
_BOOL_KEYS = ("wildcards", "strict", "thread_safe")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


def _read_yaml(path: str | Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(DispatcherConfig):
        v = env.get(ENV_PREFIX + f.name.upper())
        if v is not None:
            out[f.name] = v
    return out


def load_config(path: Optional[str | Path] = None, env: Optional[Mapping[str, str]] = None) -> DispatcherConfig:
    """YAML `dispatcher:` section (if a path is given) overlaid by PATTERNBUS_* env vars."""
    doc = _read_yaml(path) if path is not None else {}
    return _config_from_doc(doc, env, origin=path)


def _config_from_doc(doc: Dict[str, Any], env: Optional[Mapping[str, str]], origin: Any = None) -> DispatcherConfig:
    section: Dict[str, Any] = {}
    raw = doc.get("dispatcher") or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{origin}: 'dispatcher' must be a mapping")
    section.update(raw)
    section.update(_env_overrides(os.environ if env is None else env))

    known = {f.name for f in fields(DispatcherConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"unknown dispatcher keys: {', '.join(unknown)}")

    for key in _BOOL_KEYS:
        if key in section:
            section[key] = _as_bool(key, section[key])
    if "dialect" in section:
        try:
            section["dialect"] = Dialect.parse(section["dialect"])
        except ValueError as e:
            raise ConfigError(str(e)) from e
    if "name" in section:
        section["name"] = str(section["name"])

    return DispatcherConfig(**section)


def _resolve(entry: Dict[str, Any]):
    try:
        mod = importlib.import_module(entry["module"])
        fn = getattr(mod, entry["func"])
    except KeyError as e:
        raise ConfigError(f"handler entry missing {e.args[0]!r}: {entry!r}") from e
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"cannot resolve handler {entry.get('module')}.{entry.get('func')}: {e}") from e
    if not callable(fn):
        raise ConfigError(f"{entry['module']}.{entry['func']} is not callable")
    return fn


def build_from_yaml(yaml_path: str | Path, env: Optional[Mapping[str, str]] = None) -> Dispatcher:
    """Read the YAML file, build the dispatcher and register its `handlers:` list."""
    doc = _read_yaml(yaml_path)
    cfg = _config_from_doc(doc, env, origin=yaml_path)
    disp = Dispatcher.from_config(cfg)

    entries = doc.get("handlers") or []
    if not isinstance(entries, list):
        raise ConfigError(f"{yaml_path}: 'handlers' must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigError(f"handler entry must be a mapping: {entry!r}")
        # unquoted ~ / on / no load as None / True / False
        pattern = entry.get("pattern")
        if not isinstance(pattern, str) or not pattern:
            raise ConfigError(f"handler pattern must be a non-empty string (quote it in YAML): {entry!r}")
        disp.register(pattern, _resolve(entry))

    log.info("dispatcher %s built from %s (dialect=%s, handlers=%d)",
             cfg.name, yaml_path, cfg.dialect.value, len(disp))
    return disp
