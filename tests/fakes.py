"""
Shared test doubles: canned HTTP responses and in-memory collaborators.
"""

import base64
import json
from datetime import datetime, timezone
from unittest import mock

import requests

from edge_ingest.models import DeviceConfig, Message, PredictionResult


def make_response(status=200, json_body=None, text=None):
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status
    response.reason = "OK" if status < 400 else "Error"
    response.url = "https://example.test/"
    if json_body is not None:
        body = json.dumps(json_body)
    else:
        body = text or ""
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


def make_session(*responses):
    """Mock session whose post/request calls return the given responses in order."""
    session = mock.Mock(spec=requests.Session)
    session.post.side_effect = list(responses)
    session.request.side_effect = list(responses)
    return session


def received_message(
    ack_id="ack-1",
    device="device-1",
    publish_time="2024-05-01T12:34:56.789Z",
    payload=b"\xff\xd8jpeg",
    message_id="m-1",
):
    """A Pub/Sub ReceivedMessage JSON object."""
    attributes = {"deviceId": device} if device is not None else {}
    return {
        "ackId": ack_id,
        "message": {
            "data": base64.b64encode(payload).decode("ascii"),
            "attributes": attributes,
            "messageId": message_id,
            "publishTime": publish_time,
        },
    }


def make_message(ack_id="ack-1", device="device-1", publish_time=None, payload=b"img"):
    return Message(
        ack_id=ack_id,
        device_id=device,
        publish_time=publish_time
        or datetime(2024, 5, 1, 12, 34, 56, 789000, tzinfo=timezone.utc),
        payload=payload,
        message_id=f"id-{ack_id}",
    )


class FakeChannel:
    """MessageChannel that hands out queued batches and records acks."""

    def __init__(self, *batches):
        self.batches = list(batches)
        self.acked = []
        self.ack_calls = 0
        self.pull_calls = 0

    def pull(self):
        self.pull_calls += 1
        return self.batches.pop(0) if self.batches else []

    def ack(self, messages):
        self.ack_calls += 1
        self.acked.extend(messages)


class FakeStore:
    def __init__(self, succeed=True):
        self.succeed = succeed
        self.objects = {}

    def put(self, bucket, key, data, content_type="image/jpeg"):
        if self.succeed:
            self.objects[f"{bucket}/{key}"] = data
        return self.succeed


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, params):
        self.sent.append(params)
        return True


class FakeConfigStore:
    """Holds one DeviceConfig per device and records writes."""

    def __init__(self, configs=None, read_error=None, write_error=None):
        self.configs = dict(configs or {})
        self.read_error = read_error
        self.write_error = write_error
        self.writes = []

    def get_latest(self, device):
        if self.read_error:
            raise self.read_error
        return self.configs.get(device, DeviceConfig())

    def set(self, device, fields, version_to_update=None):
        if self.write_error:
            raise self.write_error
        self.writes.append((device, fields, version_to_update))


class FakeInference:
    def __init__(self, result=None, error=None):
        self.result = result or PredictionResult(class_ids=(), scores=())
        self.error = error
        self.calls = []

    def predict(self, project_id, model_id, image_bytes):
        self.calls.append((project_id, model_id, image_bytes))
        if self.error:
            raise self.error
        return self.result
