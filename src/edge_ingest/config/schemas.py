"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..processor.dashboard import DEFAULT_RULES, DEFAULT_URL
from ..utils.constants import (
    BACKOFF_BASE_DELAY,
    BACKOFF_MAX_DELAY,
    DEBOUNCE_SECONDS,
    DEFAULT_CALL_TIMEOUT,
    DEFAULT_MAX_MESSAGES,
    DEFAULT_REGION,
    IMAGE_CONTENT_TYPE,
    PULL_CONNECT_TIMEOUT,
    PULL_READ_TIMEOUT,
    SCORE_THRESHOLD,
    WEBHOOK_TIMEOUT,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class SubscriptionConfig(StrictModel):
    """Input subscription settings."""

    name: str = Field(..., min_length=1, description="Short name or full subscription path")
    max_messages: int = Field(default=DEFAULT_MAX_MESSAGES, gt=0, le=1000)
    connect_timeout: float = Field(default=PULL_CONNECT_TIMEOUT, gt=0)
    read_timeout: float = Field(default=PULL_READ_TIMEOUT, gt=0, description="Long-poll timeout")


class StorageConfig(StrictModel):
    """Image storage settings."""

    bucket: str = Field(..., min_length=1)
    content_type: str = IMAGE_CONTENT_TYPE
    timeout: float = Field(default=DEFAULT_CALL_TIMEOUT, gt=0)

    @field_validator("bucket")
    @classmethod
    def strip_scheme(cls, v: str) -> str:
        if v.startswith("gs://"):
            v = v[len("gs://"):]
        return v.rstrip("/")


class WebhookConfig(StrictModel):
    """Automation flow webhook (optional)."""

    url: str | None = None
    token: str | None = None
    timeout: float = Field(default=WEBHOOK_TIMEOUT, gt=0)


class InferenceConfig(StrictModel):
    """Prediction service settings."""

    model: str = Field(..., min_length=1)
    version: str | None = None
    score_threshold: float = Field(default=SCORE_THRESHOLD, ge=0.0, le=1.0)
    timeout: float = Field(default=DEFAULT_CALL_TIMEOUT, gt=0)


class DeviceConfigSettings(StrictModel):
    """Device registry settings."""

    registry: str = Field(..., min_length=1)
    region: str = DEFAULT_REGION
    debounce_seconds: float = Field(default=DEBOUNCE_SECONDS, ge=0)
    version_guard: bool = False
    timeout: float = Field(default=DEFAULT_CALL_TIMEOUT, gt=0)


class DashboardRuleConfig(StrictModel):
    """Show url when label is detected."""

    label: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


class DashboardConfig(StrictModel):
    """Ordered dashboard rules. First detected label wins."""

    rules: list[DashboardRuleConfig] = Field(
        default_factory=lambda: [
            DashboardRuleConfig(label=r.label, url=r.url) for r in DEFAULT_RULES
        ]
    )
    default_url: str = DEFAULT_URL


class RuntimeConfig(StrictModel):
    """Runtime configuration."""

    ack_failed_messages: bool = Field(
        default=True,
        description="Acknowledge messages whose processing failed (no redelivery)",
    )
    backoff_base_seconds: float = Field(default=BACKOFF_BASE_DELAY, gt=0)
    backoff_max_seconds: float = Field(default=BACKOFF_MAX_DELAY, gt=0)


class Config(StrictModel):
    """Complete configuration schema."""

    project: str = Field(..., min_length=1)
    subscription: SubscriptionConfig
    storage: StorageConfig
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    inference: InferenceConfig
    device_config: DeviceConfigSettings
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
