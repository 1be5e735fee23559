"""
Monitoring module for LightShuttle.

This module provides request metrics collection and exposition.
"""

from __future__ import annotations

from lightshuttle.monitoring.metrics import RequestMetrics

__all__ = ["RequestMetrics"]
