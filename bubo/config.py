from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# group name -> {source name -> feed URL}
Registry = Dict[str, Dict[str, str]]


@dataclass(frozen=True)
class Config:
    """Read-only build settings, passed explicitly through the pipeline."""
    redirects: Mapping[str, str] = field(default_factory=dict)
    timezone_offset: float = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        redirects = data.get("redirects") or {}
        if not isinstance(redirects, dict):
            raise ConfigError(f"'redirects' must be an object, got {type(redirects).__name__}")
        try:
            offset = float(data.get("timezone_offset") or 0)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'timezone_offset' must be a number: {e}") from e
        return cls(redirects=dict(redirects), timezone_offset=offset)


@dataclass
class Settings:
    """File locations, overridable from the environment (or a .env file)."""
    feeds_path: str = field(default_factory=lambda: os.getenv("BUBO_FEEDS_PATH", "src/feeds.json"))
    config_path: str = field(default_factory=lambda: os.getenv("BUBO_CONFIG_PATH", "src/config.json"))
    cache_path: str = field(default_factory=lambda: os.getenv("BUBO_CACHE_PATH", "src/cache.json"))
    output_path: str = field(default_factory=lambda: os.getenv("BUBO_OUTPUT_PATH", "output/build.json"))


def load_json(path: str) -> Dict[str, Any]:
    """
    Read a JSON object from disk.

    A missing file is not an error: a warning is logged and `{}` returned.
    A file that exists but is not valid JSON raises ConfigError.
    """
    try:
        with open(path, encoding="utf-8") as f:
            contents = f.read()
    except FileNotFoundError:
        logger.warning("Config at %s does not exist", path)
        return {}

    try:
        data = json.loads(contents)
    except ValueError as e:
        raise ConfigError(f"Config is invalid JSON: {path} ({e})") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a JSON object: {path}")
    return data


def load_config(path: str) -> Config:
    return Config.from_dict(load_json(path))


def load_registry(path: str) -> Registry:
    data = load_json(path)
    registry: Registry = {}
    for group, sources in data.items():
        if not isinstance(sources, dict):
            raise ConfigError(f"Group {group!r} in {path} must map source names to URLs")
        registry[group] = {str(name): str(url) for name, url in sources.items()}
    return registry


def registry_urls(registry: Registry, group: str) -> List[str]:
    return list(registry.get(group, {}).values())
