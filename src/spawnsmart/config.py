"""YAML config loader — reads spawnsmart.yml and the environment into AppConfig."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from spawnsmart.schemas.config import AppConfig

# Environment variable -> (section, key)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "CONTENTFUL_SPACE_ID": ("contentful", "space_id"),
    "CONTENTFUL_ACCESS_TOKEN": ("contentful", "access_token"),
    "CONTENTFUL_ENVIRONMENT": ("contentful", "environment"),
    "OPENAI_API_KEY": ("openai", "api_key"),
    "OPENAI_MODEL": ("openai", "model"),
}


def load_config(
    path: str | Path | None = None,
    *,
    environ: dict[str, str] | None = None,
) -> AppConfig:
    """Load and validate the application config.

    The YAML file is optional; environment variables override whatever it
    sets. Raises ``FileNotFoundError`` if an explicit path doesn't exist and
    ``pydantic.ValidationError`` if the content is invalid.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        loaded = yaml.safe_load(path.read_text())
        # An empty file loads as None.
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ValueError(f"Config file must be a YAML mapping, got {type(loaded).__name__}")
            raw = loaded

    # YAML sections with every key commented out load as None.
    for section in ("contentful", "openai", "recommendations"):
        if section in raw and raw[section] is None:
            raw[section] = {}

    env = os.environ if environ is None else environ
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = env.get(var)
        if not value:
            continue
        section_raw = raw.setdefault(section, {})
        # A malformed section is left for pydantic to reject.
        if isinstance(section_raw, dict):
            section_raw[key] = value

    return AppConfig(**raw)
