"""Typed configuration models for the accel library.

The config subsystem relies on pydantic to validate YAML files and to
provide strongly-typed objects to the rest of the library. Every field has
a default, so an empty file (or no file at all) yields a usable config.
"""
from __future__ import annotations

import codecs
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DECODE_ERROR_HANDLERS = ("strict", "ignore", "replace", "backslashreplace", "surrogateescape")


class TelemetryConfig(BaseModel):
    """Logging switches consumed by :func:`accel.telemetry.configure_logging`."""

    log_level: str = Field("INFO")
    log_dir: Optional[str] = None
    logger_name: str = Field("accel", min_length=1)

    model_config = ConfigDict(frozen=True)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


class StringViewConfig(BaseModel):
    """Decoding defaults used when a view is built from raw bytes."""

    encoding: str = Field("utf-8")
    errors: str = Field("strict")

    model_config = ConfigDict(frozen=True)

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            return codecs.lookup(value).name
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {value}") from exc

    @field_validator("errors")
    @classmethod
    def _known_error_handler(cls, value: str) -> str:
        if value not in _DECODE_ERROR_HANDLERS:
            raise ValueError(f"errors must be one of {_DECODE_ERROR_HANDLERS}")
        return value


class AccelConfig(BaseModel):
    """Top-level config aggregating telemetry and string view settings."""

    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    string_view: StringViewConfig = Field(default_factory=StringViewConfig)

    model_config = ConfigDict(frozen=True)
