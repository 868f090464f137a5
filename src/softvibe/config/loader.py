from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .schema import Settings

DEFAULT_CONFIG_PATH = Path("config/default.yaml")
CONFIG_PATH_ENV = "SOFTVIBE_CONFIG"
OVERRIDES_ENV = "SOFTVIBE_CONFIG_OVERRIDES"


def read_yaml(path: Path) -> Dict[str, Any]:
    """Parse a YAML mapping; a blank file reads as `{}`."""
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")
    payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level.")
    return payload


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new mapping with `override` layered over `base`, section by section."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        merged[key] = (
            merge_dicts(current, value)
            if isinstance(current, dict) and isinstance(value, dict)
            else value
        )
    return merged


def resolve_config_path(config_path: str | Path | None = None) -> Optional[Path]:
    """
    Pick the YAML file to read.

    Precedence: the explicit argument, then the `SOFTVIBE_CONFIG` environment variable,
    then `config/default.yaml` if it exists. None means "use the built-in defaults".
    """
    explicit = config_path or os.getenv(CONFIG_PATH_ENV)
    if explicit:
        return Path(explicit)
    if DEFAULT_CONFIG_PATH.is_file():
        return DEFAULT_CONFIG_PATH
    return None


def _env_overrides() -> Dict[str, Any]:
    raw = os.getenv(OVERRIDES_ENV)
    if not raw:
        return {}
    try:
        overrides = json.loads(raw)
    except json.JSONDecodeError as err:
        raise ValueError(f"Failed to parse {OVERRIDES_ENV} env var as JSON.") from err
    if not isinstance(overrides, dict):
        raise ValueError(f"{OVERRIDES_ENV} must be a JSON object.")
    return overrides


def load_settings(config_path: str | Path | None = None) -> Settings:
    """
    Build validated Settings from YAML plus JSON overrides.

    A path that was asked for explicitly (argument or `SOFTVIBE_CONFIG`) must exist.
    Overrides from `SOFTVIBE_CONFIG_OVERRIDES` are merged last, e.g.
    `{"sandbox": {"base_url": "http://localhost:2358"}}`.
    """
    path = resolve_config_path(config_path)
    data = read_yaml(path) if path is not None else {}
    data = merge_dicts(data, _env_overrides())

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
