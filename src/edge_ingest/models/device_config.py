"""
DeviceConfig - typed view of a device's remote JSON configuration.

The pipeline interprets exactly one key, dashboard_url. Every other key is
kept in an opaque passthrough map and written back verbatim, so a
read-modify-write never drops device-owned fields.
"""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from ..errors import MalformedConfigError
from ..utils.constants import DASHBOARD_URL_FIELD


@dataclass(frozen=True)
class DeviceConfig:
    """
    Latest configuration version for a device.

    Attributes:
        dashboard_url: The reserved field (None when absent)
        passthrough: All other fields, untouched
        version: Config version number (0 when the device has none)
        cloud_update_time: When this version was written (None if never)
    """

    dashboard_url: str | None = None
    passthrough: dict[str, Any] = field(default_factory=dict)
    version: int = 0
    cloud_update_time: datetime | None = None

    @classmethod
    def from_fields(
        cls,
        fields: dict[str, Any],
        version: int = 0,
        cloud_update_time: datetime | None = None,
    ) -> "DeviceConfig":
        url = fields.get(DASHBOARD_URL_FIELD)
        if not isinstance(url, str):
            # Not a usable url; kept verbatim in passthrough
            url = None
        passthrough = {
            k: v for k, v in fields.items() if not (k == DASHBOARD_URL_FIELD and url is not None)
        }
        return cls(
            dashboard_url=url,
            passthrough=passthrough,
            version=version,
            cloud_update_time=cloud_update_time,
        )

    @classmethod
    def from_blob(
        cls,
        blob: bytes,
        version: int = 0,
        cloud_update_time: datetime | None = None,
    ) -> "DeviceConfig":
        """
        Parse raw config bytes. An empty blob is an empty config.

        Raises:
            MalformedConfigError: If the blob is not a JSON object
        """
        if not blob or not blob.strip():
            fields = {}
        else:
            try:
                fields = json.loads(blob)
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise MalformedConfigError(f"config version {version} is not JSON: {e}") from e
            if not isinstance(fields, dict):
                raise MalformedConfigError(
                    f"config version {version} is {type(fields).__name__}, expected object"
                )
        return cls.from_fields(fields, version, cloud_update_time)

    def to_fields(self) -> dict[str, Any]:
        """Full blob contents: passthrough fields plus dashboard_url if set."""
        fields = dict(self.passthrough)
        if self.dashboard_url is not None:
            fields[DASHBOARD_URL_FIELD] = self.dashboard_url
        return fields

    def to_blob(self) -> bytes:
        return json.dumps(self.to_fields()).encode("utf-8")

    def with_dashboard_url(self, url: str) -> "DeviceConfig":
        """Copy with only dashboard_url changed."""
        return replace(self, dashboard_url=url, passthrough=dict(self.passthrough))
