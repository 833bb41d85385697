"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions inherit from.
All specialized exceptions are in their respective themed modules.

Author: System Architect
Date: 2025-12-08
"""

from typing import Any


class TierCacheError(Exception):
    """
    Base exception for all tiered cache errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling
    - Structured error logging
    - Rich context for debugging

    Attributes:
        message: Error message
        details: Additional error details (dict)

    Example:
        raise CacheKeyError(
            "Redis GET failed",
            details={"key": "tiercache:u:42", "error_code": "timeout"}
        )
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = (details or {}).copy()  # Create a copy to prevent external modification
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with error_type, message and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

    @classmethod
    def from_exception(cls, exc: Exception, message: str | None = None, **details) -> "TierCacheError":
        """
        Create an error from another exception.

        Useful for wrapping third-party exceptions with additional context.

        Args:
            exc: Original exception to wrap
            message: Custom message (defaults to original exception message)
            **details: Additional context to include

        Returns:
            New instance with wrapped exception details

        Example:
            >>> try:
            ...     await client.ping()
            ... except (ConnectionError, TimeoutError) as e:
            ...     raise CacheConnectionError.from_exception(e, host="localhost", port=6379) from e
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details,
        }
        return cls(error_message, details=error_details)


# Configuration exception (kept here as it's fundamental)
class ConfigurationError(TierCacheError):
    """Raised when configuration is invalid or missing."""
    pass
