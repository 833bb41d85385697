"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .cache_factory import CacheTestFactory, RecordingObserver, SpyTier

__all__ = ["CacheTestFactory", "RecordingObserver", "SpyTier"]
