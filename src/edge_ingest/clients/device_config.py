"""
Cloud IoT device configuration store.

Reads the newest configuration version of a device and pushes full
replacement blobs. Deciding whether to write is the orchestrator's job.
"""

import base64
import binascii
import logging
from typing import Any

import requests

from ..errors import ConfigStoreError
from ..models.device_config import DeviceConfig
from ..utils.constants import CLOUDIOT_API, DEFAULT_CALL_TIMEOUT, DEFAULT_REGION
from ..utils.timefmt import parse_rfc3339

logger = logging.getLogger(__name__)


class DeviceConfigStore:
    """
    Read/modify/write wrapper around per-device configuration.

    Args:
        session: Authorized requests session
        project: GCP project id
        registry: IoT registry id
        region: Registry location
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        session: requests.Session,
        project: str,
        registry: str,
        region: str = DEFAULT_REGION,
        timeout: float = DEFAULT_CALL_TIMEOUT,
    ):
        self._session = session
        self.project = project
        self.registry = registry
        self.region = region
        self._timeout = timeout

    def device_path(self, device: str) -> str:
        return (
            f"projects/{self.project}/locations/{self.region}"
            f"/registries/{self.registry}/devices/{device}"
        )

    def get_latest(self, device: str) -> DeviceConfig:
        """
        Fetch the most recent configuration version.

        A device with no recorded versions yields an empty config.

        Raises:
            ConfigStoreError: Request failed or the listing was unusable
            MalformedConfigError: The newest blob is not a JSON object
        """
        url = f"{CLOUDIOT_API}/{self.device_path(device)}/configVersions"
        payload = self._request("GET", url, device)

        versions = payload.get("deviceConfigs") or []
        if not versions:
            logger.debug(f"Device {device} has no config versions")
            return DeviceConfig()

        try:
            latest = max(versions, key=lambda v: int(v.get("version", 0)))
            version = int(latest.get("version", 0))
            update_time = latest.get("cloudUpdateTime")
            cloud_update_time = parse_rfc3339(update_time) if update_time else None
            blob = base64.b64decode(latest.get("binaryData", ""), validate=True)
        except (TypeError, ValueError, binascii.Error) as e:
            raise ConfigStoreError(f"Unusable config listing for {device}: {e}") from e

        return DeviceConfig.from_blob(blob, version=version, cloud_update_time=cloud_update_time)

    def set(
        self,
        device: str,
        fields: dict[str, Any],
        version_to_update: int | None = None,
    ) -> None:
        """
        Replace the device's configuration with fields.

        Args:
            device: Device id
            fields: Complete configuration object
            version_to_update: When given, the write only succeeds if this is
                still the latest version

        Raises:
            ConfigStoreError: If the write was rejected or failed
        """
        url = f"{CLOUDIOT_API}/{self.device_path(device)}:modifyCloudToDeviceConfig"
        blob = DeviceConfig.from_fields(fields).to_blob()
        body = {"binaryData": base64.b64encode(blob).decode("ascii")}
        if version_to_update is not None:
            body["versionToUpdate"] = str(version_to_update)

        self._request("POST", url, device, json=body)

    def _request(self, method: str, url: str, device: str, **kwargs) -> dict[str, Any]:
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise ConfigStoreError(f"{method} config for {device} failed: {e}") from e

        if not response.ok:
            raise ConfigStoreError(
                f"{method} config for {device} failed: {response.status_code} {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ConfigStoreError(f"{method} config for {device} returned non-JSON body") from e

        if not isinstance(payload, dict):
            raise ConfigStoreError(f"{method} config for {device} returned non-object body")
        return payload
