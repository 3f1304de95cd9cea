"""
Utils Module
通用工具函数
"""
from .logger import setup_logger
from .exceptions import (
    SageBrowserError,
    ConfigurationError,
    StorageError,
    FilterError,
    FetchError,
    AuthAbsentError,
    AuthExpiredError,
    HttpStatusError,
    ParseError,
    NetworkError,
)

__all__ = [
    "setup_logger",
    "SageBrowserError",
    "ConfigurationError",
    "StorageError",
    "FilterError",
    "FetchError",
    "AuthAbsentError",
    "AuthExpiredError",
    "HttpStatusError",
    "ParseError",
    "NetworkError",
]
