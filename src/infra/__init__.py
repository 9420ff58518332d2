"""
Infrastructure package.

This package contains logging configuration.
"""

from src.infra.logging_cfg import build_logger, log_event, JsonFormatter, ThrottledFilter, LOGGER_NAME

__all__ = [
    "build_logger",
    "log_event",
    "JsonFormatter",
    "ThrottledFilter",
    "LOGGER_NAME",
]
