"""Telemetry and observability helpers.

This package emits deterministic component events for cache, throttle, and fetch activity.
"""

from .logger import EventLogger, configure_logging

__all__ = ["EventLogger", "configure_logging"]
