"""
Core utilities and configuration for Gradii.

This package provides core functionality including logging configuration,
monitoring hooks, error types and the persistence layer.
"""

from gradii.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
