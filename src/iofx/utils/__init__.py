"""
iofx Utilities Package

Configuration, error types and structured logging helpers.
"""

from .config import DEFAULT_UPLOAD_URL, IofxConfig
from .errors import (
    FixtureMismatchError,
    IofxError,
    MissingResourceError,
    SaveError,
    WorkflowStateError,
)
from .logging import get_logger, setup_logging

__all__ = [
    "IofxError",
    "MissingResourceError",
    "SaveError",
    "WorkflowStateError",
    "FixtureMismatchError",
    "IofxConfig",
    "DEFAULT_UPLOAD_URL",
    "get_logger",
    "setup_logging",
]
