"""
Utilities module for LightShuttle.

This module provides common utilities like logging configuration.
"""

from __future__ import annotations

from lightshuttle.utils.logger import get_logger, logger

__all__ = ["get_logger", "logger"]
