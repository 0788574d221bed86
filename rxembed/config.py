"""Configuration management for rxembed."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from .models.config import DEFAULT_TWITCH_ANCESTORS, AppConfig

# Application name for XDG paths
APP_NAME = "rxembed"

# Default configuration
DEFAULT_CONFIG: dict[str, Any] = {
    "upstream": {
        "base_url": "https://www.reddit.com",
        "user_agent": "rxembed/1.0 (+https://github.com/rxembed/rxembed)",
        "post_timeout_seconds": 2.0,  # primary post fetch
        "media_timeout_seconds": 5.0,  # /v/<token> refresh, heavier than a post fetch
        "enrichment_timeout_seconds": 3.0,  # manifest scrape, clip scrape, stream API
    },
    "service": {
        "public_url": "http://localhost:8000",
        "site_name": "rxembed",
        "cache_max_age": 3600,
        "media_redirect_max_age": 60,
        "error_max_age": 60,
        "error_embed_ratio": 0.1,
    },
    "embeds": {
        "gallery_limit": 4,
        "default_width": 1280,
        "default_height": 720,
        "min_oembed_dimension": 500,
        "show_nsfw_media": False,
        "stream_api_url": "https://koutube.com/api/watch",
        "twitch_ancestors": list(DEFAULT_TWITCH_ANCESTORS),
    },
}

# Environment variables that override a single config key
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "RXEMBED_PUBLIC_URL": ("service", "public_url"),
    "RXEMBED_UPSTREAM_URL": ("upstream", "base_url"),
}


def get_xdg_config_home() -> Path:
    """Get XDG config home directory."""
    return Path(os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")))


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_xdg_config_home() / APP_NAME / "config.json"


def load_config() -> dict[str, Any]:
    """Load configuration, merging file and environment overrides onto defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        with open(config_path) as f:
            user_config = json.load(f)
            config = deep_merge(config, user_config)

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config.setdefault(section, {})[key] = value

    return config


def load_settings() -> AppConfig:
    """Load configuration as a validated settings object."""
    return AppConfig.model_validate(load_config())


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
