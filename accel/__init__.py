"""Compatibility primitives shared across the accel library.

The package exposes two leaf value types, a discriminated union
(:class:`~accel.compat.Variant`) and a non-owning character window
(:class:`~accel.compat.StringView`), plus the config and telemetry helpers
that the rest of the library uses to wire them up.
"""

from .compat import NPOS, StringView, Variant, in_place_type, visit

__all__ = ["NPOS", "StringView", "Variant", "in_place_type", "visit"]
