"""
Exceptions raised by the connectors.
"""

from typing import Optional


class ConnectorError(Exception):
    """Base class for connector errors."""
    pass


class ConfigurationError(ConnectorError):
    """Raised when required settings (credentials, URLs) are missing."""
    pass


class NotSupportedError(ConnectorError):
    """Raised when a schema is asked for a table it does not provide."""
    pass


class RequestCancelled(ConnectorError):
    """Raised by an API client when the query was cancelled before or between attempts."""
    pass


class DataSourceError(ConnectorError):
    """
    Raised to the consumer of a row stream when the fetch behind it failed.

    The original exception is kept as ``__cause__``.
    """

    def __init__(self, source_name: str, message: Optional[str] = None):
        self.source_name = source_name
        super().__init__(message or f"Data source '{source_name}' failed")
