"""
Configuration loading.

Sources, later ones winning:
1. YAML file (sectioned layout, or the flat legacy layout)
2. Environment variables (PROJECT, INPUT_SUBSCRIPTION, SAVE_BUCKET, ...)

The merged dict is validated with the pydantic schema. Anything missing
or invalid is a setup error: the process cannot start.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from ..utils.constants import (
    ENV_BLOCKS_TOKEN,
    ENV_BLOCKS_URL,
    ENV_INPUT_SUBSCRIPTION,
    ENV_IOT_REGION,
    ENV_IOT_REGISTRY,
    ENV_ML_MODEL,
    ENV_PROJECT,
    ENV_SAVE_BUCKET,
)
from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"

SECTIONS = (
    "subscription",
    "storage",
    "webhook",
    "inference",
    "device_config",
    "dashboard",
    "runtime",
)

# Flat keys of the legacy layout -> (section, field)
LEGACY_KEYS: dict[str, tuple[str | None, str]] = {
    "project": (None, "project"),
    "input_subscription": ("subscription", "name"),
    "bucket": ("storage", "bucket"),
    "blocks_url": ("webhook", "url"),
    "blocks_token": ("webhook", "token"),
    "ml_model": ("inference", "model"),
    "iot_registry": ("device_config", "registry"),
    "iot_region": ("device_config", "region"),
}

# Environment variable -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    ENV_PROJECT: (None, "project"),
    ENV_INPUT_SUBSCRIPTION: ("subscription", "name"),
    ENV_SAVE_BUCKET: ("storage", "bucket"),
    ENV_BLOCKS_URL: ("webhook", "url"),
    ENV_BLOCKS_TOKEN: ("webhook", "token"),
    ENV_ML_MODEL: ("inference", "model"),
    ENV_IOT_REGISTRY: ("device_config", "registry"),
    ENV_IOT_REGION: ("device_config", "region"),
}


def _set(config: dict, section: str | None, key: str, value: Any) -> None:
    if section is None:
        config[key] = value
        return
    if not isinstance(config.get(section), dict):
        config[section] = {}
    config[section][key] = value


def find_config_file(config_path: str | None) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (must exist)
    2. Current directory (config.yaml)
    3. ~/.config/edge-ingest/config.yaml

    Returns:
        Path to config file, or None when running from environment only

    Raises:
        ConfigError: If an explicitly specified file does not exist
    """
    if config_path:
        specified = Path(config_path)
        if not specified.exists():
            raise ConfigError(f"Specified config file not found: {config_path}")
        return specified

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "edge-ingest" / DEFAULT_CONFIG_NAME,
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None


def normalize_legacy_keys(config: dict) -> dict:
    """
    Convert the flat legacy layout (project, input_subscription, bucket,
    blocks_url, ...) into sections. Sectioned keys are left alone.
    """
    for flat_key, (section, key) in LEGACY_KEYS.items():
        if section is None or flat_key not in config:
            continue
        value = config.pop(flat_key)
        existing = config.get(section)
        if isinstance(existing, dict) and key in existing:
            logger.warning(f"Ignoring legacy key '{flat_key}' (already set in '{section}')")
            continue
        _set(config, section, key, value)
    return config


def load_config_with_env(config: dict, environ: Mapping[str, str] | None = None) -> dict:
    """
    Apply environment variable overrides.

    Args:
        config: Base configuration dictionary
        environ: Environment mapping (os.environ by default)

    Returns:
        Configuration with environment variables applied
    """
    environ = os.environ if environ is None else environ
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            logger.debug(f"Using {env_name} from environment")
            _set(config, section, key, value)
    return config


def read_config_file(path: Path) -> dict:
    """
    Read a YAML config file.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")

    # A section whose keys are all commented out loads as None
    for section in SECTIONS:
        if section in data and data[section] is None:
            data[section] = {}
    return data


def load_config(
    config_path: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """
    Load, merge and validate configuration.

    Args:
        config_path: Explicit YAML path (searched for when None)
        environ: Environment mapping (os.environ by default)

    Returns:
        Validated Config

    Raises:
        ConfigError: If the file is unreadable or validation fails
    """
    config_file = find_config_file(config_path)
    if config_file:
        raw = read_config_file(config_file)
        logger.info(f"Configuration loaded from {config_file}")
    else:
        raw = {}
        logger.info("No config file found, using environment only")

    raw = normalize_legacy_keys(raw)
    raw = load_config_with_env(raw, environ)

    try:
        return validate_config_pydantic(raw)
    except ValidationError as e:
        errors = []
        for err in e.errors():
            location = ".".join(str(p) for p in err["loc"]) or "config"
            errors.append(f"{location}: {err['msg']}")
        raise ConfigError(
            "Configuration validation failed:\n" + "\n".join(f"  - {msg}" for msg in errors)
        ) from e


def mask_secret(value: str | None) -> str:
    """Replace every character with '*' (empty string for None)."""
    return "*" * len(value) if value else ""


def describe_config(config: Config) -> list[str]:
    """Human-readable summary lines with secrets masked."""
    lines = [
        f"PubSub:{config.subscription.name} -> ML Engine -> GCS(gs://{config.storage.bucket}/) & Cloud IoT",
        f"project = {config.project}",
        f"subscription = {config.subscription.name}",
        f"bucket = {config.storage.bucket}",
        f"webhook_url = {config.webhook.url or '(disabled)'}",
        f"webhook_token = {mask_secret(config.webhook.token)}",
        f"ml_model = {config.inference.model}"
        + (f" (version {config.inference.version})" if config.inference.version else ""),
        f"iot_registry = {config.device_config.registry} ({config.device_config.region})",
        f"score_threshold = {config.inference.score_threshold}",
        f"debounce_seconds = {config.device_config.debounce_seconds}",
        f"ack_failed_messages = {config.runtime.ack_failed_messages}",
    ]
    for rule in config.dashboard.rules:
        lines.append(f"rule: {rule.label} -> {rule.url}")
    lines.append(f"default: {config.dashboard.default_url}")
    return lines
