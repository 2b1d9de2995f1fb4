"""
Tests for configuration validators, request IDs, metrics, and logging setup.
"""

import re

import pytest
from loguru import logger

from lightsync.config import Config
from lightsync.services.session import SyncSession
from lightsync.utils.ids import generate_request_id, generate_oauth_state
from lightsync.utils.logging import configure_logging, get_logger, log_event
from lightsync.utils.metrics import MetricsCollector


class TestConfig:
    """Test configuration defaults and validators"""

    def test_pipeline_defaults(self):
        assert Config.COLOR_COUNT == 8
        assert Config.TARGET_LUMA == 0.55
        assert Config.POLL_INTERVAL == 5.0

    @pytest.mark.parametrize("value,ok", [(0.55, True), (1.0, True), (0.0, False), (1.2, False)])
    def test_validate_target_luma(self, value, ok):
        assert Config.validate_target_luma(value) is ok

    @pytest.mark.parametrize("value,ok", [(1, True), (8, True), (0, False), (17, False)])
    def test_validate_color_count(self, value, ok):
        assert Config.validate_color_count(value) is ok


class TestIds:
    def test_request_id_format(self):
        assert re.match(r"^accent-\d{14}-[0-9a-f]{8}$", generate_request_id("accent"))

    def test_oauth_state_unique(self):
        assert generate_oauth_state() != generate_oauth_state()


class TestSession:
    def test_backoff_remaining(self):
        session = SyncSession(backoff_until=110.0)
        assert session.backoff_remaining(100.0) == 10.0
        assert session.backoff_remaining(200.0) == 0.0

    def test_authorized(self):
        assert SyncSession().authorized is False
        assert SyncSession(access_token="x").authorized is True


class TestMetricsCollector:
    def test_counters_and_timings(self):
        metrics = MetricsCollector()
        metrics.increment_accent_pick()
        metrics.increment_fallback("empty_palette")
        metrics.increment_govee_backoff(429)
        for ms in [10.0, 20.0, 30.0]:
            metrics.record_timing("accent_pick", ms)

        counters = metrics.get_counters()
        assert counters["accent_picks_total"] == 1
        assert counters["accent_fallback_total_empty_palette"] == 1
        assert counters["govee_backoff_total_429"] == 1

        stats = metrics.get_timing_stats()["accent_pick_duration_ms"]
        assert stats["count"] == 3
        assert stats["mean"] == pytest.approx(20.0)
        assert stats["p50"] == pytest.approx(20.0)

    def test_reset(self):
        metrics = MetricsCollector()
        metrics.increment_track_change()
        metrics.reset()
        assert metrics.get_counters() == {}


class TestLogging:
    def test_log_event_carries_extra(self):
        configure_logging(level="DEBUG")
        messages = []
        handler_id = logger.add(messages.append, format="{message} {extra}")
        try:
            log_event("track changed", extra={"track_id": "t1"})
        finally:
            logger.remove(handler_id)

        assert len(messages) == 1
        assert "track changed" in messages[0]
        assert "t1" in messages[0]

    def test_get_logger_binds_extra(self):
        assert get_logger(request_id="r1") is not get_logger()
