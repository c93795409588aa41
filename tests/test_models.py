"""
Tests for data models and small utilities.
"""

import unittest
from datetime import datetime, timedelta, timezone

from edge_ingest.models import Detection, Message
from edge_ingest.utils.backoff import Backoff
from edge_ingest.utils.timefmt import format_iso8601_ms, parse_rfc3339

from fakes import received_message


class TestMessage(unittest.TestCase):
    """Test Message.from_received envelope parsing."""

    def test_valid_message(self):
        message = Message.from_received(
            received_message(ack_id="a1", device="cam-1", payload=b"\xff\xd8", message_id="42")
        )

        self.assertTrue(message.is_valid)
        self.assertEqual(message.ack_id, "a1")
        self.assertEqual(message.device_id, "cam-1")
        self.assertEqual(message.payload, b"\xff\xd8")
        self.assertEqual(message.message_id, "42")
        self.assertEqual(
            message.publish_time,
            datetime(2024, 5, 1, 12, 34, 56, 789000, tzinfo=timezone.utc),
        )
        self.assertEqual(message.attributes, {"deviceId": "cam-1"})

    def test_missing_device_is_invalid(self):
        message = Message.from_received(received_message(ack_id="a2", device=None))

        self.assertFalse(message.is_valid)
        self.assertEqual(message.ack_id, "a2")
        self.assertIn("deviceId", message.invalid_reason)

    def test_bad_publish_time_is_invalid(self):
        message = Message.from_received(received_message(publish_time="yesterday"))
        self.assertFalse(message.is_valid)
        self.assertIsNone(message.publish_time)

    def test_non_base64_payload_is_invalid(self):
        received = received_message()
        received["message"]["data"] = "not base64!!"
        self.assertFalse(Message.from_received(received).is_valid)

    def test_missing_body_is_invalid(self):
        message = Message.from_received({"ackId": "a3"})
        self.assertFalse(message.is_valid)


class TestDetection(unittest.TestCase):

    def test_repr_is_label_and_score(self):
        self.assertEqual(repr(Detection(label="apple", score=0.9, class_id=53)), "('apple', 0.900)")


class TestTimeFormat(unittest.TestCase):

    def test_parse_nanoseconds_truncated(self):
        parsed = parse_rfc3339("2024-05-01T12:00:00.123456789Z")
        self.assertEqual(parsed, datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc))

    def test_parse_without_fraction(self):
        self.assertEqual(
            parse_rfc3339("2024-05-01T12:00:00Z"),
            datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc),
        )

    def test_parse_offset_converted_to_utc(self):
        parsed = parse_rfc3339("2024-05-01T21:00:00.5+09:00")
        self.assertEqual(parsed, datetime(2024, 5, 1, 12, 0, 0, 500000, tzinfo=timezone.utc))
        self.assertEqual(parsed.utcoffset(), timedelta(0))

    def test_parse_rejects_garbage(self):
        for value in ("", "2024-05-01", "soon", None):
            with self.assertRaises(ValueError):
                parse_rfc3339(value)

    def test_format_milliseconds(self):
        moment = datetime(2024, 5, 1, 12, 0, 0, 7999, tzinfo=timezone.utc)
        self.assertEqual(format_iso8601_ms(moment), "2024-05-01T12:00:00.007Z")

    def test_format_converts_to_utc(self):
        moment = datetime(2024, 5, 1, 21, 0, 0, tzinfo=timezone(timedelta(hours=9)))
        self.assertEqual(format_iso8601_ms(moment), "2024-05-01T12:00:00.000Z")


class TestBackoff(unittest.TestCase):

    def setUp(self):
        self.sleeps = []
        self.backoff = Backoff(base_delay=1.0, max_delay=5.0, sleep=self.sleeps.append)

    def test_doubles_until_cap(self):
        for _ in range(5):
            self.backoff.failure()
        self.assertEqual(self.sleeps, [1.0, 2.0, 4.0, 5.0, 5.0])

    def test_reset(self):
        self.backoff.failure()
        self.backoff.failure()
        self.backoff.reset()

        self.assertEqual(self.backoff.next_delay(), 0.0)
        self.backoff.failure()
        self.assertEqual(self.sleeps[-1], 1.0)


if __name__ == "__main__":
    unittest.main()
