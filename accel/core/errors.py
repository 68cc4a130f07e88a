"""Error hierarchy shared by the accel subsystems.

Access errors also derive from the matching builtin (``TypeError`` or
``IndexError``) so callers that only know the builtin contract can still
catch them. Submodules should raise the most specific error available.
"""
from __future__ import annotations


class AccelError(Exception):
    """Base class for all custom exceptions in the library."""


class BadVariantAccess(AccelError, TypeError):
    """Raised when the requested alternative is not the active one."""


class AlternativeError(AccelError, TypeError):
    """Raised when a type or index is not part of a variant's alternative set."""


class ViewIndexError(AccelError, IndexError):
    """Raised for positions outside a string view."""


class ConfigurationError(AccelError):
    """Raised when configuration files are missing or invalid."""
