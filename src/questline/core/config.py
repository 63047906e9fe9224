"""3-layer configuration system for Questline.

Loads and merges configuration from:
1. Default settings (built-in)
2. Config file (questline.yaml, or an explicit --config path)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

CONFIG_FILENAME = "questline.yaml"

DEFAULT_CONFIG: dict = {
    "ai": {
        "simulate": False,
        "simulate_delay_seconds": 0.5,
        "timeout_seconds": 120,
        "gemini": {"endpoint": "https://generativelanguage.googleapis.com"},
        "openai": {"endpoint": "https://api.openai.com"},
        "anthropic": {
            "endpoint": "https://api.anthropic.com",
            "api_version": "2023-06-01",
        },
        "xai": {"endpoint": "https://api.x.ai"},
    },
    "credentials": {
        "provider": "gemini",
        "env_var": "API_KEY",
    },
    "pipeline": {
        "agents": [],
        "stop_on_failure": True,
        "follow_up_questions": [],
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_config_file(config_path: Path) -> dict:
    """Load a YAML config file. Missing or unreadable files give {}."""
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        data = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def get_effective_config(
    config_path: Optional[Path] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
    file_config = load_config_file(Path(config_path))
    if file_config:
        config = deep_merge(config, file_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    return config
