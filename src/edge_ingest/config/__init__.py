"""
Configuration loading and validation.

- load_config: YAML file + environment overrides, validated with pydantic
- load_config_with_env: Apply environment variable overrides
- normalize_legacy_keys: Accept the flat legacy layout
- describe_config: Startup summary with secrets masked
"""

from .loader import (
    describe_config,
    find_config_file,
    load_config,
    load_config_with_env,
    mask_secret,
    normalize_legacy_keys,
    read_config_file,
)
from .schemas import (
    Config,
    DashboardConfig,
    DeviceConfigSettings,
    InferenceConfig,
    RuntimeConfig,
    StorageConfig,
    SubscriptionConfig,
    WebhookConfig,
    validate_config_pydantic,
)

__all__ = [
    # Pydantic validation
    "Config",
    "DashboardConfig",
    "DeviceConfigSettings",
    "InferenceConfig",
    "RuntimeConfig",
    "StorageConfig",
    "SubscriptionConfig",
    "WebhookConfig",
    # Loading
    "describe_config",
    "find_config_file",
    "load_config",
    "load_config_with_env",
    "mask_secret",
    "normalize_legacy_keys",
    "read_config_file",
    "validate_config_pydantic",
]
