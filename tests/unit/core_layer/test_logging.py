"""
Unit Tests for Logging Module

Tests logger creation, correlation context, processors and log_stage.
"""

from unittest.mock import MagicMock, patch

import pytest

from tiercache.core.config.constants import LOG_KEY_MAX_LENGTH, Stage
from tiercache.core.logging.logger import (
    add_correlation_id,
    add_log_level_name,
    add_timestamp,
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_stage,
    set_correlation_id,
    setup_logging,
    truncate_cache_key,
)


@pytest.fixture(autouse=True)
def reset_correlation_id():
    clear_correlation_id()
    yield
    clear_correlation_id()


@pytest.mark.unit
class TestLoggerCreation:
    """Test logger creation and configuration."""

    def test_get_logger_returns_logger_instance(self):
        logger = get_logger(__name__)

        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")

    def test_setup_logging_accepts_both_formats(self, test_settings):
        with patch("tiercache.core.logging.logger.get_settings", return_value=test_settings):
            setup_logging(log_format="json")
            setup_logging()

        assert get_logger("after-setup") is not None


@pytest.mark.unit
class TestCorrelationContext:
    """Test correlation id context management."""

    def test_set_and_get(self):
        set_correlation_id("req-123")

        assert get_correlation_id() == "req-123"

    def test_clear(self):
        set_correlation_id("req-123")
        clear_correlation_id()

        assert get_correlation_id() is None

    def test_processor_injects_correlation_id(self):
        set_correlation_id("req-9")

        event = add_correlation_id(None, "info", {"event": "x"})

        assert event["correlation_id"] == "req-9"

    def test_processor_skips_when_unset(self):
        assert "correlation_id" not in add_correlation_id(None, "info", {"event": "x"})


@pytest.mark.unit
class TestProcessors:
    """Test the custom structlog processors."""

    def test_timestamp_is_utc_iso(self):
        event = add_timestamp(None, "info", {})

        assert event["timestamp"].endswith("Z")

    def test_level_name_uppercased(self):
        assert add_log_level_name(None, "info", {"level": "warning"})["level"] == "WARNING"

    def test_long_cache_key_truncated(self):
        key = "k" * (LOG_KEY_MAX_LENGTH + 10)

        event = truncate_cache_key(None, "info", {"cache_key": key})

        assert event["cache_key"] == "k" * LOG_KEY_MAX_LENGTH + "..."

    def test_short_cache_key_untouched(self):
        assert truncate_cache_key(None, "info", {"cache_key": "u:42"})["cache_key"] == "u:42"


@pytest.mark.unit
class TestLogStage:
    """Test log_stage convenience function."""

    def test_log_stage_uses_stage_value(self):
        logger = MagicMock()

        log_stage(logger, Stage.BACKFILL, "Tier backfilled", cache_key="k", tier="redis")

        logger.info.assert_called_once_with("Tier backfilled", stage="2.3_BACKFILL", cache_key="k", tier="redis")

    def test_log_stage_respects_level(self):
        logger = MagicMock()

        log_stage(logger, "2.1_TIER_PROBE", "Tier read failed", level="WARNING")

        logger.warning.assert_called_once_with("Tier read failed", stage="2.1_TIER_PROBE")
        logger.info.assert_not_called()
