"""
Exception Module

Structured exception hierarchy for the tiered cache coordinator.

Module Structure:
-----------------
- **base.py**: TierCacheError base class + ConfigurationError
- **cache.py**: Backend errors and per-tier operation errors

Usage:
------
```python
from tiercache.core.exceptions import CacheKeyError, TierReadError
```

Author: System Architect
Date: 2025-12-08
"""

# Base exception
from tiercache.core.exceptions.base import ConfigurationError, TierCacheError

# Cache exceptions
from tiercache.core.exceptions.cache import (
    CacheConnectionError,
    CacheError,
    CacheKeyError,
    CacheSerializationError,
    TierDeleteError,
    TierOperationError,
    TierReadError,
    TierTimeoutError,
    TierWriteError,
)

__all__ = [
    # Base
    "TierCacheError",
    "ConfigurationError",
    # Backend
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    "CacheSerializationError",
    # Tier operations
    "TierOperationError",
    "TierReadError",
    "TierWriteError",
    "TierDeleteError",
    "TierTimeoutError",
]
