"""
Cloud Storage object sink (write-only).
"""

import logging

import requests

from ..utils.constants import DEFAULT_CALL_TIMEOUT, IMAGE_CONTENT_TYPE, STORAGE_UPLOAD_API

logger = logging.getLogger(__name__)


class ObjectStore:
    """
    Uploads objects with a single media upload request.

    An existing object with the same name is replaced, so re-uploading a
    redelivered message is harmless. Failures are reported, not retried.
    """

    def __init__(self, session: requests.Session, timeout: float = DEFAULT_CALL_TIMEOUT):
        self._session = session
        self._timeout = timeout

    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str = IMAGE_CONTENT_TYPE,
    ) -> bool:
        """
        Upload data to gs://bucket/key.

        Returns:
            True if the object was written
        """
        url = f"{STORAGE_UPLOAD_API}/b/{bucket}/o"
        try:
            response = self._session.post(
                url,
                params={"uploadType": "media", "name": key},
                data=data,
                headers={"Content-Type": content_type},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Upload to gs://{bucket}/{key} failed: {e}")
            return False

        if not response.ok:
            logger.error(
                f"Upload to gs://{bucket}/{key} failed: {response.status_code} {response.text[:200]}"
            )
            return False

        logger.debug(f"Uploaded {len(data)} bytes to gs://{bucket}/{key}")
        return True
