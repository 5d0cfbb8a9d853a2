"""Configuration loader for the rental recommender."""

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv


def load_config(config_path: str = "./config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary containing merged configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    # Load environment variables from .env file
    load_dotenv()

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Copy config/config.example.yaml to config/config.yaml and customize it."
        )

    with open(config_file, "r") as f:
        config = yaml.safe_load(f) or {}

    _validate_config(config)

    # Environment overrides
    db_path = get_env("INTERACTIONS_DB_PATH")
    if db_path:
        config.setdefault("storage", {})["database_path"] = db_path

    return config


def _validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration structure."""
    if not isinstance(config, dict):
        raise ValueError("Configuration must be a mapping")

    if "preferences" not in config:
        raise ValueError("Missing required config section: preferences")
    config["preferences"] = config["preferences"] or {}

    price_range = config["preferences"].get("price_range") or {}
    if price_range:
        if "min" not in price_range or "max" not in price_range:
            raise ValueError("price_range must have min and max")
        if price_range["min"] > price_range["max"]:
            raise ValueError(
                f"price_range min ({price_range['min']}) must not exceed max ({price_range['max']})"
            )

    for section in ("recommendations", "history_limits"):
        for key, value in (config.get(section) or {}).items():
            if key.endswith("_score"):
                continue
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{section}.{key} must be a positive integer, got {value!r}")

    data = config.get("data") or {}
    if data and "catalog_path" not in data:
        raise ValueError("Missing catalog_path in data section")


def get_env(key: str, default: str = None, required: bool = False) -> str:
    """
    Get environment variable with optional default and required check.

    Args:
        key: Environment variable name
        default: Default value if not set
        required: If True, raise error when not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required and not set
    """
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable not set: {key}")
    return value
