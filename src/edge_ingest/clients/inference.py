"""
Online prediction client for the hosted object-detection model.

Owns its authorized session: constructed once at startup and reused for
every message.
"""

import base64
import logging
from typing import Any

import requests

from ..errors import InferenceServiceError, InferenceTransportError
from ..models.detection import PredictionResult
from ..utils.constants import DEFAULT_CALL_TIMEOUT, ML_API

logger = logging.getLogger(__name__)

# Every request carries a single instance under this key
INSTANCE_KEY = "1"


def build_instances(image_bytes: bytes) -> list[dict[str, Any]]:
    """Request instances for one image: [{"key": "1", "image": {"b64": ...}}]."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return [{"key": INSTANCE_KEY, "image": {"b64": encoded}}]


class InferenceClient:
    """
    Request/response wrapper around the prediction REST endpoint.

    Args:
        session: Authorized requests session
        model_version: Optional model version; the model's default otherwise
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        session: requests.Session,
        model_version: str | None = None,
        timeout: float = DEFAULT_CALL_TIMEOUT,
    ):
        self._session = session
        self.model_version = model_version
        self._timeout = timeout

    def _predict_url(self, project_id: str, model_id: str) -> str:
        name = f"projects/{project_id}/models/{model_id}"
        if self.model_version:
            name += f"/versions/{self.model_version}"
        return f"{ML_API}/{name}:predict"

    def predict(self, project_id: str, model_id: str, image_bytes: bytes) -> PredictionResult:
        """
        Run detection on one image.

        Returns:
            PredictionResult for the single instance

        Raises:
            InferenceTransportError: Network failure or body not usable JSON
            InferenceServiceError: Body carries an "error" payload
        """
        body = {"instances": build_instances(image_bytes)}

        try:
            response = self._session.post(
                self._predict_url(project_id, model_id),
                json=body,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise InferenceTransportError(project_id, model_id, f"request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise InferenceTransportError(
                project_id,
                model_id,
                f"HTTP {response.status_code}, body is not JSON: {response.text[:200]!r}",
            ) from e

        if not isinstance(payload, dict):
            raise InferenceTransportError(project_id, model_id, "response is not a JSON object")

        if payload.get("error"):
            raise InferenceServiceError(project_id, model_id, str(payload["error"]))

        return parse_predictions(project_id, model_id, payload)


def parse_predictions(project_id: str, model_id: str, payload: dict[str, Any]) -> PredictionResult:
    """
    Extract the first instance's detection_classes/detection_scores.

    Raises:
        InferenceTransportError: If the expected structure is missing
    """
    predictions = payload.get("predictions")
    if not isinstance(predictions, list) or not predictions:
        raise InferenceTransportError(project_id, model_id, "response has no predictions")

    first = predictions[0]
    if not isinstance(first, dict):
        raise InferenceTransportError(project_id, model_id, "prediction is not an object")

    try:
        class_ids = tuple(int(c) for c in first["detection_classes"])
        scores = tuple(float(s) for s in first["detection_scores"])
        return PredictionResult(class_ids=class_ids, scores=scores)
    except (KeyError, TypeError, ValueError) as e:
        raise InferenceTransportError(
            project_id, model_id, f"malformed prediction: {e}"
        ) from e
