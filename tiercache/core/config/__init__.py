"""
Configuration Module

Centralized, type-safe configuration for the tiered cache coordinator.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Stage identifiers, tier event kinds and defaults

Usage:
------
```python
from tiercache.core.config import get_settings
from tiercache.core.config.constants import Stage, TierEventKind

settings = get_settings()
default_ttl = settings.cache.CACHE_DEFAULT_TTL
```

Environment Variables:
---------------------
```bash
REDIS_HOST=localhost
REDIS_PORT=6379
CACHE_DEFAULT_TTL=300
CACHE_TTL_FACTOR=2
TIER_OPERATION_TIMEOUT=2.0
LOG_LEVEL=INFO
LOG_FORMAT=json
```

Author: System Architect
Date: 2025-12-05
"""

from tiercache.core.config.constants import (
    CACHE_KEY_HASH_PREFIX,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_TTL_FACTOR,
    L1_CACHE_MAX_SIZE,
    LOG_KEY_MAX_LENGTH,
    REDIS_KEY_PREFIX,
    Stage,
    TierEventKind,
    TierOperation,
)
from tiercache.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Enums
    "Stage",
    "TierEventKind",
    "TierOperation",
    # Defaults
    "DEFAULT_TTL_FACTOR",
    "DEFAULT_OPERATION_TIMEOUT",
    "L1_CACHE_MAX_SIZE",
    "LOG_KEY_MAX_LENGTH",
    # Key prefixes
    "REDIS_KEY_PREFIX",
    "CACHE_KEY_HASH_PREFIX",
]
