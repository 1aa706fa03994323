"""
Core module initialization
"""

from .config import config
from .logger import logger
from .errors import ErrorKind, ErrorResponse, ErrorResponseModel, StoreError

__all__ = [
    "config",
    "logger",
    "ErrorKind",
    "ErrorResponse",
    "ErrorResponseModel",
    "StoreError",
]
