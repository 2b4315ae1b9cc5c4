"""
Core modules: configuration, logging and exceptions.
"""

from .config import Settings, get_settings, reset_settings
from .exceptions import ConnectorError, ConfigurationError, NotSupportedError, RequestCancelled, DataSourceError
from .logging_config import setup_logging, get_logger, LoggerMixin

__all__ = [
    'Settings',
    'get_settings',
    'reset_settings',
    'ConnectorError',
    'ConfigurationError',
    'NotSupportedError',
    'RequestCancelled',
    'DataSourceError',
    'setup_logging',
    'get_logger',
    'LoggerMixin',
]
