from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import ConfigError

DEFAULT_CONFIG = "site.toml"
DEFAULT_CONTENT_DIR = "content"
DEFAULT_JSON_OUTPUT = "static/data/pages.json"
DEFAULT_RSS_OUTPUT = "static/rss.xml"

SITE_TITLE = "Patrick's Bevs"
SITE_URL = "https://bev.pdewey.com"
SITE_DESCRIPTION = "RSS feed of Patrick Dewey's bev website"


@dataclass(frozen=True)
class SiteConfig:
    title: str = SITE_TITLE
    url: str = SITE_URL
    description: str = SITE_DESCRIPTION

    @classmethod
    def from_mapping(cls, config: dict) -> "SiteConfig":
        def cfg_str(key: str, default: str) -> str:
            value = config.get(key)
            return default if value is None else str(value)

        return cls(
            title=cfg_str("site_title", SITE_TITLE),
            url=cfg_str("site_url", SITE_URL),
            description=cfg_str("site_description", SITE_DESCRIPTION),
        )


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return data


def config_int(config: dict, key: str, default: int) -> int:
    value = config.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigError(f"Config value {key!r} must be an integer, got {value!r}")
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"Config value {key!r} must be an integer, got {value!r}") from exc
