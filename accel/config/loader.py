"""YAML loader for the config subsystem.

``accel.yml`` carries two optional root sections, ``telemetry`` and
``string_view``; both are validated by the models in models.py.
"""
from __future__ import annotations

from pathlib import Path
from typing import Mapping

import yaml

from accel.core.errors import ConfigurationError

from .models import AccelConfig

_DEFAULT_CONFIG_PATH = Path("config") / "accel.yml"


def _read_yaml(path: Path) -> Mapping:
    """Read a YAML file and return a mapping (empty dict if file is blank)."""

    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"YAML root must be a mapping in {path}")
    return data


def load_config(path: Path | str = _DEFAULT_CONFIG_PATH) -> AccelConfig:
    """Load accel.yml into an :class:`AccelConfig`.

    Unknown sections are ignored; schema violations raise pydantic's
    ``ValidationError``.
    """

    data = _read_yaml(Path(path))
    return AccelConfig.model_validate(data)
