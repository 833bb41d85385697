"""
Unit Tests for Core Exceptions

Tests the base error contract and the per-tier operation errors.
"""

import pytest

from tiercache.core.exceptions import (
    CacheConnectionError,
    CacheError,
    CacheKeyError,
    ConfigurationError,
    TierCacheError,
    TierDeleteError,
    TierOperationError,
    TierReadError,
    TierTimeoutError,
    TierWriteError,
)


@pytest.mark.unit
class TestTierCacheError:
    """Test the base exception class."""

    def test_message_and_details(self):
        details = {"key": "value", "code": 123}
        error = TierCacheError("Test message", details=details)

        assert str(error) == "Test message"
        assert error.message == "Test message"
        assert error.details == details

    def test_details_are_copied(self):
        details = {"key": "value"}
        error = TierCacheError("Test", details=details)
        details["key"] = "changed"

        assert error.details["key"] == "value"

    def test_default_details_empty(self):
        assert TierCacheError("Test").details == {}

    def test_to_dict(self):
        error = ConfigurationError("bad config", details={"field": "max_size"})

        assert error.to_dict() == {
            "error_type": "ConfigurationError",
            "message": "bad config",
            "details": {"field": "max_size"},
        }

    def test_from_exception_wraps_original(self):
        error = CacheConnectionError.from_exception(OSError("refused"), host="localhost")

        assert isinstance(error, CacheConnectionError)
        assert error.message == "refused"
        assert error.details["original_error"] == "OSError"
        assert error.details["host"] == "localhost"

    def test_hierarchy(self):
        assert issubclass(CacheError, TierCacheError)
        assert issubclass(CacheKeyError, CacheError)
        assert issubclass(TierReadError, TierOperationError)
        assert issubclass(TierTimeoutError, TierOperationError)


@pytest.mark.unit
class TestTierOperationErrors:
    """Test per-tier operation errors."""

    @pytest.mark.parametrize(
        "error_class,operation",
        [(TierReadError, "get"), (TierWriteError, "put"), (TierDeleteError, "delete")],
    )
    def test_operation_recorded(self, error_class, operation):
        cause = CacheKeyError("backend down")
        error = error_class("failed", "redis", 1, cause=cause)

        assert error.tier == "redis"
        assert error.tier_index == 1
        assert error.cause is cause
        assert error.details["operation"] == operation
        assert error.details["original_error"] == "CacheKeyError"
        assert error.details["original_message"] == "backend down"

    def test_timeout_error_carries_operation_and_timeout(self):
        error = TierTimeoutError("timed out", "redis", 1, operation="put", timeout=0.5)

        assert error.operation == "put"
        assert error.timeout == 0.5
        assert error.details == {"tier": "redis", "tier_index": 1, "operation": "put", "timeout": 0.5}

    def test_timeout_operation_does_not_leak_to_class(self):
        TierTimeoutError("timed out", "redis", 1, operation="delete", timeout=1.0)

        assert TierOperationError.operation == "unknown"
