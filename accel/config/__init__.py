"""Configuration loading and validation package."""

from .loader import load_config
from .models import AccelConfig, StringViewConfig, TelemetryConfig

__all__ = [
    "AccelConfig",
    "StringViewConfig",
    "TelemetryConfig",
    "load_config",
]
