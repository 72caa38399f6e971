"""Shared utilities."""

from .logging_setup import get_logger, log_operation, setup_logging, timed_operation

__all__ = ["get_logger", "log_operation", "setup_logging", "timed_operation"]
