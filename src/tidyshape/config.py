from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .exceptions import ConfigError


# -----------------------------
# Reshape defaults (tidyshape.yaml)
# -----------------------------

@dataclass(frozen=True)
class ReshapeConfig:
    key_name: str = "key"
    value_name: str = "value"
    na_rm: bool = False
    convert: bool = False
    strict_types: bool = False
    # cell value used by spread for missing combinations
    fill: Any = None

    def merged(self, **overrides: Any) -> "ReshapeConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


DEFAULT_CONFIG = ReshapeConfig()

_BOOL_KEYS = ("na_rm", "convert", "strict_types")
_NAME_KEYS = ("key_name", "value_name")


def _read_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"YAML root must be a mapping/dict: {p}")
    return data


def config_from_mapping(raw: Mapping[str, Any], ctx: str = "config") -> ReshapeConfig:
    """Validate a mapping of option values and build a ReshapeConfig from it."""
    known = {f.name for f in fields(ReshapeConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown key(s) {unknown} in {ctx}; expected some of {sorted(known)}")

    for key in _NAME_KEYS:
        if key in raw and (not isinstance(raw[key], str) or not raw[key]):
            raise ConfigError(f"'{key}' in {ctx} must be a non-empty string, got {raw[key]!r}")
    for key in _BOOL_KEYS:
        if key in raw and not isinstance(raw[key], bool):
            raise ConfigError(f"'{key}' in {ctx} must be true or false, got {raw[key]!r}")

    config = replace(DEFAULT_CONFIG, **raw)
    if config.key_name == config.value_name:
        raise ConfigError(f"key_name and value_name in {ctx} must differ, both are {config.key_name!r}")
    return config


def load_config(path: str | Path) -> ReshapeConfig:
    """
    Load reshape defaults from YAML.

    The options may sit at the top level or under a ``reshape:`` key:

        reshape:
          key_name: roadtype
          value_name: mpg
          na_rm: true
    """
    raw = _read_yaml(path)
    if "reshape" in raw:
        section = raw["reshape"]
        if section is None:
            return DEFAULT_CONFIG
        if not isinstance(section, dict):
            raise ConfigError(f"Expected a mapping/dict in {path}:reshape, got {type(section)}")
        return config_from_mapping(section, ctx=f"{path}:reshape")
    return config_from_mapping(raw, ctx=str(path))


def resolve_config(config: Optional[ReshapeConfig]) -> ReshapeConfig:
    return DEFAULT_CONFIG if config is None else config
