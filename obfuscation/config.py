"""
Obfuscator configuration: numeric coefficient, date offset and output styles.

Typical usage:
1) Start from DEFAULT_CONFIG (or load one via `load_config_from_json(...)`)
2) Override single fields via `merge_config(...)`
3) Pass the result to `Obfuscator(config)`

Validation happens here, once, so obfuscation calls never fail on settings.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Literal, get_args
import json
import logging
import math

logger = logging.getLogger(__name__)


IpStyle = Literal["keep_ends", "private_range"]
NameStyle = Literal["readable", "hash_prefixed"]


@dataclass(frozen=True, slots=True)
class ObfuscatorConfig:
    """
    Settings for one obfuscation job.

    - coefficient: multiplier for integers, floats and ports
    - date_offset_days: days added to every YYYY-MM-DD date (negative shifts back)
    - ip_style: "keep_ends" keeps the first and last octet; "private_range"
      maps every address into 10.x.x.x
    - name_style: "readable" builds flower/city names; "hash_prefixed" builds
      host-<hex> / rs-<hex> names
    """

    coefficient: float = 0.917
    date_offset_days: int = -42
    ip_style: IpStyle = "keep_ends"
    name_style: NameStyle = "readable"


DEFAULT_CONFIG = ObfuscatorConfig()

_FIELD_NAMES = frozenset(f.name for f in fields(ObfuscatorConfig))


def validate_config(config: ObfuscatorConfig) -> None:
    c = config.coefficient
    if isinstance(c, bool) or not isinstance(c, (int, float)) or not math.isfinite(c) or c <= 0:
        raise ValueError(f"coefficient must be a finite number > 0, got {c!r}")
    d = config.date_offset_days
    if isinstance(d, bool) or not isinstance(d, int):
        raise ValueError(f"date_offset_days must be an integer, got {d!r}")
    if config.ip_style not in get_args(IpStyle):
        raise ValueError(f"Unknown ip_style {config.ip_style!r}; expected one of {get_args(IpStyle)}")
    if config.name_style not in get_args(NameStyle):
        raise ValueError(f"Unknown name_style {config.name_style!r}; expected one of {get_args(NameStyle)}")


def _check_keys(keys) -> None:
    unknown = sorted(set(keys) - _FIELD_NAMES)
    if unknown:
        raise ValueError(f"Unknown obfuscator config keys: {unknown!r}")


def merge_config(base: ObfuscatorConfig = DEFAULT_CONFIG, **overrides: Any) -> ObfuscatorConfig:
    """
    Create a new config by overlaying `overrides` on top of `base`.
    """
    _check_keys(overrides)
    merged = replace(base, **overrides)
    validate_config(merged)
    return merged


def config_from_dict(raw: Dict[str, Any]) -> ObfuscatorConfig:
    """
    Build a config from a plain mapping; missing keys keep their defaults.
    """
    _check_keys(raw)
    return merge_config(DEFAULT_CONFIG, **raw)


def load_config_from_json(path: str) -> ObfuscatorConfig:
    """
    Load a config from a JSON file.

    Expected JSON shape (every key optional):
    {
      "coefficient": 0.917,
      "date_offset_days": -42,
      "ip_style": "keep_ends",
      "name_style": "readable"
    }
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Obfuscator config JSON must be an object, got {type(raw).__name__}")

    config = config_from_dict(raw)
    logger.info("loaded obfuscator config from %s: %s", path, config_to_dict(config))
    return config


def config_to_dict(config: ObfuscatorConfig) -> Dict[str, Any]:
    return asdict(config)
