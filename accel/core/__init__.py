"""Core primitives shared across all subsystems.

This module aggregates common type aliases and the error hierarchy. Higher
level packages import from here to avoid circular dependencies.
"""

from . import errors, types

__all__ = ["errors", "types"]
