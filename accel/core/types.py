"""Shared type aliases and sentinels.

Positions returned by the search family are plain ints; the aliases below
keep signatures readable and make the sentinel contract explicit.
"""
from __future__ import annotations

import sys
from typing import Any, Callable, NewType, TypeAlias

Index = NewType("Index", int)

# One past any index a str can hold; never a valid position.
NPOS: Index = Index(sys.maxsize)

Handler: TypeAlias = Callable[[Any], Any]
