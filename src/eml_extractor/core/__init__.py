"""Core utilities for configuration, logging, and shared models."""

from .config import (
    AppSettings,
    EncodingSettings,
    ExtractionSettings,
    LoggingSettings,
    load_app_settings,
)
from .logging import configure_logging

__all__ = [
    "AppSettings",
    "EncodingSettings",
    "ExtractionSettings",
    "LoggingSettings",
    "configure_logging",
    "load_app_settings",
]
