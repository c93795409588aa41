"""
Tests for the notification backends.
"""

import unittest
from datetime import datetime, timezone
from unittest.mock import patch

import requests

from edge_ingest.processor.notifiers import NullNotifier, create_notifier
from edge_ingest.processor.notifiers.webhook import WebhookNotifier, build_params

from fakes import make_response


class TestBuildParams(unittest.TestCase):

    def test_fields(self):
        published = datetime(2024, 5, 1, 12, 34, 56, 789123, tzinfo=timezone.utc)
        params = build_params(
            "cam-1", published, "gs://b/original/x.jpg", "gs://b/annotated/x.jpg"
        )
        self.assertEqual(
            params,
            {
                "published_time": "2024-05-01T12:34:56.789Z",
                "device": "cam-1",
                "original_gcs": "gs://b/original/x.jpg",
                "annotated_gcs": "gs://b/annotated/x.jpg",
            },
        )


class TestCreateNotifier(unittest.TestCase):

    def test_no_url_gives_null_notifier(self):
        self.assertIsInstance(create_notifier({}), NullNotifier)
        self.assertIsInstance(create_notifier({"url": None, "token": "x"}), NullNotifier)

    def test_url_gives_webhook(self):
        self.assertIsInstance(create_notifier({"url": "https://hook.test"}), WebhookNotifier)

    def test_null_notifier_accepts(self):
        self.assertTrue(NullNotifier().notify({"device": "cam-1"}))


class TestWebhookNotifier(unittest.TestCase):

    def setUp(self):
        self.notifier = WebhookNotifier({"url": "https://hook.test/flow", "token": "secret", "timeout": 3})
        self.params = {"device": "cam-1", "published_time": "2024-05-01T12:00:00.000Z"}

    @patch("edge_ingest.processor.notifiers.webhook.requests.post")
    def test_form_post_with_token(self, mock_post):
        mock_post.return_value = make_response(200, {})

        self.assertTrue(self.notifier.notify(self.params))

        mock_post.assert_called_once()
        self.assertEqual(mock_post.call_args.args[0], "https://hook.test/flow")
        form = mock_post.call_args.kwargs["data"]
        self.assertEqual(form["api_token"], "secret")
        self.assertEqual(form["device"], "cam-1")
        self.assertEqual(mock_post.call_args.kwargs["timeout"], 3)
        self.assertNotIn("api_token", self.params)

    @patch("edge_ingest.processor.notifiers.webhook.requests.post")
    def test_no_token_field_without_token(self, mock_post):
        mock_post.return_value = make_response(200, {})
        WebhookNotifier({"url": "https://hook.test"}).notify(self.params)
        self.assertNotIn("api_token", mock_post.call_args.kwargs["data"])

    @patch("edge_ingest.processor.notifiers.webhook.requests.post")
    def test_error_status_does_not_raise(self, mock_post):
        mock_post.return_value = make_response(500, text="boom")
        with self.assertLogs("edge_ingest.processor.notifiers.webhook", level="WARNING"):
            self.assertFalse(self.notifier.notify(self.params))

    @patch("edge_ingest.processor.notifiers.webhook.requests.post")
    def test_network_error_does_not_raise(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")
        self.assertFalse(self.notifier.notify(self.params))


if __name__ == "__main__":
    unittest.main()
