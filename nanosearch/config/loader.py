"""Configuration loading utilities."""

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger

from nanosearch.config.schema import Config

_DEFAULT_BASE_URLS = {
    "brave": "https://api.search.brave.com/res/v1/web/search",
    "tavily": "https://api.tavily.com/search",
    "exa": "https://api.exa.ai/search",
    "perplexity": "https://api.perplexity.ai/search",
}


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".nanosearch" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            data = _migrate_config(data)
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to load config from {}: {}", path, e)
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(by_alias=True)

    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def _migrate_config(data: dict) -> dict:
    """Migrate old config formats to current."""
    search_cfg = data.setdefault("search", {})

    # Move legacy search.apiKey -> search.providers.brave.apiKey
    providers_cfg = search_cfg.setdefault("providers", {})
    legacy_api_key = search_cfg.pop("apiKey", None)
    if legacy_api_key:
        brave_cfg = providers_cfg.setdefault("brave", {})
        if not brave_cfg.get("apiKey"):
            brave_cfg["apiKey"] = legacy_api_key

    # Rename legacy search.local.browserName -> search.local.browser
    local_cfg = search_cfg.get("local")
    if isinstance(local_cfg, dict) and "browserName" in local_cfg:
        legacy_browser = local_cfg.pop("browserName")
        local_cfg.setdefault("browser", legacy_browser)

    # Fill default provider base URLs when missing/empty
    for name, base_url in _DEFAULT_BASE_URLS.items():
        provider_cfg = providers_cfg.setdefault(name, {})
        if not provider_cfg.get("baseUrl"):
            provider_cfg["baseUrl"] = base_url

    return data


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case recursively."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase recursively."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(word.capitalize() for word in rest)
