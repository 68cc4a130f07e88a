"""Value types backfilled for the rest of the library.

:class:`Variant` is a closed discriminated union with index-driven visitor
dispatch; :class:`StringView` is a non-owning window over character data.
The two are independent of each other.
"""

from .string_view import NPOS, StringView
from .variant import (
    VARIANT_NPOS,
    InPlaceIndex,
    InPlaceType,
    Variant,
    check_visitor,
    in_place_index,
    in_place_type,
    visit,
)

__all__ = [
    "InPlaceIndex",
    "InPlaceType",
    "NPOS",
    "StringView",
    "VARIANT_NPOS",
    "Variant",
    "check_visitor",
    "in_place_index",
    "in_place_type",
    "visit",
]
