"""Helpers to persist, restore and validate reporter configuration."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

from .defaults import (
    BACKENDS,
    LEVELS,
    POLICY_KINDS,
    PRINT_ORDERS,
    FormatConfig,
    PolicyConfig,
    ReporterConfig,
)

T = TypeVar("T")

CONFIG_PATH = Path(os.environ.get("STAGETIME_CONFIG", "var/stagetime_config.json"))

_NESTED_TYPES = {
    "policy": PolicyConfig,
    "format": FormatConfig,
}


def reporter_config_to_dict(config: ReporterConfig) -> Dict[str, Any]:
    """Convert a ReporterConfig to a JSON-ready dict."""
    return _dataclass_to_dict(config)


def reporter_config_from_dict(data: Dict[str, Any], base: Optional[ReporterConfig] = None) -> ReporterConfig:
    """Construct a validated ReporterConfig from a dict, merging with base defaults."""
    base_config = base or ReporterConfig()
    config = _dict_to_dataclass(ReporterConfig, data, base_config)
    validate_reporter_config(config)
    return config


def save_reporter_config(config: ReporterConfig, path: Optional[Path] = None) -> None:
    """Persist configuration to disk as JSON."""
    target = path or CONFIG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = reporter_config_to_dict(config)
    target.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def load_reporter_config(path: Optional[Path] = None, base: Optional[ReporterConfig] = None) -> ReporterConfig:
    """Load configuration from disk; return defaults when file is absent."""
    source = path or CONFIG_PATH
    base_config = base or ReporterConfig()
    if not source.exists():
        return base_config
    data = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("reporter configuration file must contain a JSON object")
    return reporter_config_from_dict(data, base_config)


def validate_reporter_config(config: ReporterConfig) -> None:
    """Raise ValueError when a field holds a value no component accepts."""
    _check_types(config)
    if config.level.upper() not in LEVELS:
        raise ValueError(f"Unsupported level: {config.level}")
    if config.backend not in BACKENDS:
        raise ValueError(f"Unsupported backend: {config.backend}")
    if config.policy.kind not in POLICY_KINDS:
        raise ValueError(f"Unsupported policy kind: {config.policy.kind}")
    if config.policy.every_n < 1:
        raise ValueError("policy.every_n must be at least 1")
    if config.policy.window_s <= 0 or config.policy.max_per_window < 1:
        raise ValueError("policy.window_s must be positive and policy.max_per_window at least 1")
    if config.format.print_order not in PRINT_ORDERS:
        raise ValueError(f"Unsupported print order: {config.format.print_order}")
    if config.format.precision < 0 or config.format.width < 0:
        raise ValueError("format.precision and format.width must not be negative")


def _check_types(config: ReporterConfig) -> None:
    for name in ("event", "level", "backend", "logger_name"):
        if not isinstance(getattr(config, name), str):
            raise ValueError(f"{name} must be a string")
    counts = {
        "policy.every_n": config.policy.every_n,
        "policy.max_per_window": config.policy.max_per_window,
        "format.precision": config.format.precision,
        "format.width": config.format.width,
    }
    for name, value in counts.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an integer")
    window = config.policy.window_s
    if isinstance(window, bool) or not isinstance(window, (int, float)):
        raise ValueError("policy.window_s must be a number")
    for name in ("policy.kind", "format.print_order"):
        section, key = name.split(".")
        if not isinstance(getattr(getattr(config, section), key), str):
            raise ValueError(f"{name} must be a string")


def _dataclass_to_dict(instance: Any) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for field in fields(instance):
        value = getattr(instance, field.name)
        if is_dataclass(value):
            result[field.name] = _dataclass_to_dict(value)
        else:
            result[field.name] = value
    return result


def _dict_to_dataclass(cls: Type[T], data: Dict[str, Any], base: Optional[T] = None) -> T:
    base_instance = base if base is not None else cls()
    kwargs: Dict[str, Any] = {}
    valid_fields = {field.name for field in fields(cls)}
    unknown = set(data.keys()) - valid_fields
    if unknown:
        unknown_list = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown fields for {cls.__name__}: {unknown_list}")
    for field in fields(cls):
        name = field.name
        if name in _NESTED_TYPES:
            nested_cls = _NESTED_TYPES[name]
            incoming = data.get(name) or {}
            if not isinstance(incoming, dict):
                raise ValueError(f"Section {name} must be an object")
            nested_base = getattr(base_instance, name)
            kwargs[name] = _dict_to_dataclass(nested_cls, incoming, nested_base)
        else:
            if name in data:
                value = data[name]
            else:
                value = deepcopy(getattr(base_instance, name))
            kwargs[name] = value
    return cls(**kwargs)
