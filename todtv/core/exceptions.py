"""
Core Exceptions - Custom exception classes for the TodTV provider.

Provider operations never surface these to the host: they are raised by the
transport and configuration layers and turned into empty or absent results
at the plugin boundary.
"""

from typing import Optional, Any


class TodTvError(Exception):
    """Base exception class for all provider-specific errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize provider error.

        Args:
            message: Human-readable error message
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigurationError(TodTvError):
    """Raised when a plugin receives an invalid configuration."""

    def __init__(self, message: str, plugin_name: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.plugin_name = plugin_name


class PluginError(TodTvError):
    """Raised when plugin discovery, loading or dispatch fails."""

    def __init__(self, message: str, plugin_name: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize plugin error.

        Args:
            message: Error description
            plugin_name: Name of the problematic plugin
            details: Additional error context
        """
        super().__init__(message, details)
        self.plugin_name = plugin_name


class NetworkError(TodTvError):
    """Raised when a request fails or returns an HTTP error status."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None, details: Optional[Any] = None):
        """
        Initialize network error.

        Args:
            message: Error description
            url: URL that caused the error
            status_code: HTTP status code if applicable
            details: Additional error context
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class ExtractorError(TodTvError):
    """Raised when an embedded player page cannot be resolved."""

    def __init__(self, message: str, url: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.url = url


# Export all exception classes
__all__ = [
    "TodTvError",
    "ConfigurationError",
    "PluginError",
    "NetworkError",
    "ExtractorError",
]
