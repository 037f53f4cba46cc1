# Area: Shared
"""
Shared utilities used by the lifecycle and world layers.

This package contains:
- Logging configuration
- Fatal startup error reporting
"""

from .logging_config import (
    setup_logging,
    log_and_terminate,
    log_configuration_error,
    TerminalFormatter,
    JSONFormatter,
)

__all__ = [
    "setup_logging",
    "log_and_terminate",
    "log_configuration_error",
    "TerminalFormatter",
    "JSONFormatter",
]
