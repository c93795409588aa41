"""
Tests for dashboard selection and the debounced update decision.
"""

import unittest
from datetime import datetime, timedelta, timezone

from edge_ingest.models import Detection, DeviceConfig, OutcomeStatus
from edge_ingest.processor.dashboard import (
    DEFAULT_RULES,
    DEFAULT_URL,
    DashboardRule,
    decide_update,
    resolve_target_url,
)

URL_A = DEFAULT_RULES[0].url
URL_B = DEFAULT_RULES[1].url
URL_C = DEFAULT_URL


def det(label, score=0.9):
    return Detection(label=label, score=score, class_id=0)


class TestResolveTargetUrl(unittest.TestCase):
    """Fixed-priority rule: apple, then banana, then default."""

    def test_default_rules_match_original_urls(self):
        self.assertTrue(URL_A.endswith("apple-pie.jpg"))
        self.assertTrue(URL_B.endswith("banana-cereal.jpg"))
        self.assertTrue(URL_C.endswith("pizza2.jpg"))

    def test_apple_wins_regardless_of_others(self):
        """Test any set containing apple resolves to A."""
        cases = [
            [det("apple")],
            [det("apple", 0.21), det("banana", 0.99)],
            [det("banana", 0.99), det("fork"), det("apple", 0.25)],
        ]
        for detections in cases:
            self.assertEqual(resolve_target_url(detections), URL_A)

    def test_banana_without_apple(self):
        self.assertEqual(resolve_target_url([det("fork"), det("banana", 0.3)]), URL_B)

    def test_neither_falls_back_to_default(self):
        self.assertEqual(resolve_target_url([det("fork", 0.5)]), URL_C)
        self.assertEqual(resolve_target_url([]), URL_C)

    def test_unknown_passthrough_label_never_matches(self):
        self.assertEqual(resolve_target_url([det("class_12")]), URL_C)

    def test_custom_rules_keep_order(self):
        rules = [DashboardRule("cat", "cat-url"), DashboardRule("dog", "dog-url")]
        self.assertEqual(resolve_target_url([det("dog"), det("cat")], rules, "none"), "cat-url")
        self.assertEqual(resolve_target_url([det("bird")], rules, "none"), "none")


class TestDecideUpdate(unittest.TestCase):
    """Debounce and no-op rules."""

    def setUp(self):
        self.now = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def config(self, url, seconds_ago):
        return DeviceConfig(
            dashboard_url=url,
            passthrough={"brightness": 70},
            version=4,
            cloud_update_time=self.now - timedelta(seconds=seconds_ago),
        )

    def test_same_url_is_unchanged_regardless_of_timing(self):
        for seconds_ago in (1, 30, 3600):
            status = decide_update(self.config(URL_C, seconds_ago), URL_C, self.now)
            self.assertEqual(status, OutcomeStatus.UNCHANGED)

    def test_recent_write_is_debounced(self):
        status = decide_update(self.config(URL_C, 5), URL_A, self.now)
        self.assertEqual(status, OutcomeStatus.DEBOUNCED)

    def test_update_after_window(self):
        status = decide_update(self.config(URL_C, 30), URL_A, self.now)
        self.assertEqual(status, OutcomeStatus.UPDATED)

    def test_window_boundary(self):
        """Test exactly 20 s elapsed is enough, 19.999 s is not."""
        at_boundary = self.config(URL_C, 20)
        self.assertEqual(decide_update(at_boundary, URL_A, self.now), OutcomeStatus.UPDATED)

        just_inside = DeviceConfig(
            dashboard_url=URL_C,
            cloud_update_time=self.now - timedelta(seconds=19, milliseconds=999),
        )
        self.assertEqual(decide_update(just_inside, URL_A, self.now), OutcomeStatus.DEBOUNCED)

    def test_custom_debounce(self):
        config = self.config(URL_C, 30)
        self.assertEqual(
            decide_update(config, URL_A, self.now, debounce_seconds=60),
            OutcomeStatus.DEBOUNCED,
        )

    def test_never_written_config_updates(self):
        self.assertEqual(decide_update(DeviceConfig(), URL_A, self.now), OutcomeStatus.UPDATED)


if __name__ == "__main__":
    unittest.main()
