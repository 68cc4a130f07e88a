"""Read-only, non-owning window over character data.

A :class:`StringView` keeps a reference to a source ``str`` plus an offset
and a length; neither construction nor slicing copies characters. Search
operations return positions relative to the view, or :data:`NPOS` when
nothing matches.

Empty pattern convention: the empty string occurs at every position, so
``find("")`` returns ``pos`` while ``pos <= size`` and ``starts_with("")``,
``ends_with("")`` and ``contains("")`` are true. The empty character set has
no members, so ``find_first_of("")`` / ``find_last_of("")`` return NPOS and
the ``*_not_of("")`` variants return the first/last position in range.

Integer indexing is bounds-checked against ``[0, size)`` and raises
:class:`~accel.core.errors.ViewIndexError`; negative integers are rejected
rather than counted from the end. Slices follow normal Python slice rules
and yield sub-views.
"""
from __future__ import annotations

from functools import total_ordering
from typing import Any, Callable, ClassVar, Iterator, Tuple, Union

from accel.config.models import StringViewConfig
from accel.core.errors import ViewIndexError
from accel.core.types import NPOS, Index

Pattern = Union[str, "StringView"]


def _as_text(pattern: Any) -> str:
    if isinstance(pattern, str):
        return pattern
    if isinstance(pattern, StringView):
        return str(pattern)
    raise TypeError(f"Expected str or StringView pattern, got {type(pattern).__name__}")


def _check_pos(pos: int) -> None:
    if pos < 0:
        raise ViewIndexError(f"Search position must be non-negative, got {pos}")


@total_ordering
class StringView:
    """Immutable view over ``source[offset:offset + length]``."""

    __slots__ = ("_source", "_offset", "_size")

    npos: ClassVar[Index] = NPOS

    def __init__(self, source: Pattern, length: int | None = None, offset: int = 0) -> None:
        if isinstance(source, StringView):
            base, base_offset, available = source._source, source._offset, source._size
        elif isinstance(source, str):
            base, base_offset, available = source, 0, len(source)
        else:
            raise TypeError(f"StringView needs str data, got {type(source).__name__}")
        if not 0 <= offset <= available:
            raise ViewIndexError(f"Offset {offset} outside source of length {available}")
        if length is None:
            length = available - offset
        elif length < 0 or offset + length > available:
            raise ViewIndexError(
                f"Length {length} at offset {offset} exceeds source of length {available}"
            )
        object.__setattr__(self, "_source", base)
        object.__setattr__(self, "_offset", base_offset + offset)
        object.__setattr__(self, "_size", length)

    @classmethod
    def from_cstring(cls, source: str, offset: int = 0) -> "StringView":
        """Build a view that stops at the first ``"\\0"`` at or after ``offset``."""

        if not 0 <= offset <= len(source):
            raise ViewIndexError(f"Offset {offset} outside source of length {len(source)}")
        terminator = source.find("\0", offset)
        end = len(source) if terminator < 0 else terminator
        return cls(source, end - offset, offset)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview, config: StringViewConfig | None = None) -> "StringView":
        """Decode ``data`` with the configured codec and view the result."""

        settings = config or StringViewConfig()
        return cls(bytes(data).decode(settings.encoding, settings.errors))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self) -> Tuple[Any, ...]:
        return (type(self), (self._source, self._size, self._offset))

    # Size / data ------------------------------------------------------
    @property
    def size(self) -> int:
        return self._size

    @property
    def data(self) -> str:
        """The referenced source string (the view starts at :attr:`offset`)."""

        return self._source

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def empty(self) -> bool:
        return self._size == 0

    def get_size(self) -> int:
        return self._size

    def get_data(self) -> str:
        return self._source

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, key: int | slice) -> Any:
        if isinstance(key, slice):
            start, stop, step = key.indices(self._size)
            if step != 1:
                raise ValueError("StringView slices must be contiguous (step 1)")
            return StringView(self._source, max(stop - start, 0), self._offset + start)
        if not 0 <= key < self._size:
            raise ViewIndexError(f"Index {key} out of range for view of size {self._size}")
        return self._source[self._offset + key]

    def __iter__(self) -> Iterator[str]:
        for position in range(self._offset, self._offset + self._size):
            yield self._source[position]

    def __str__(self) -> str:
        return self._source[self._offset : self._offset + self._size]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    # Predicates -------------------------------------------------------
    def starts_with(self, pattern: Pattern) -> bool:
        return self._source.startswith(_as_text(pattern), self._offset, self._offset + self._size)

    def ends_with(self, pattern: Pattern) -> bool:
        return self._source.endswith(_as_text(pattern), self._offset, self._offset + self._size)

    def contains(self, pattern: Pattern) -> bool:
        return self.find(pattern) != NPOS

    def __contains__(self, pattern: object) -> bool:
        return self.contains(pattern)  # type: ignore[arg-type]

    # Substring search -------------------------------------------------
    def find(self, pattern: Pattern, pos: int = 0) -> int:
        """Index of the first occurrence of ``pattern`` at or after ``pos``."""

        text = _as_text(pattern)
        _check_pos(pos)
        if pos > self._size:
            return NPOS
        found = self._source.find(text, self._offset + pos, self._offset + self._size)
        return NPOS if found < 0 else found - self._offset

    def rfind(self, pattern: Pattern, pos: int = NPOS) -> int:
        """Index of the last occurrence of ``pattern`` starting at or before ``pos``."""

        text = _as_text(pattern)
        _check_pos(pos)
        if len(text) > self._size:
            return NPOS
        last_start = min(pos, self._size - len(text))
        found = self._source.rfind(text, self._offset, self._offset + last_start + len(text))
        return NPOS if found < 0 else found - self._offset

    # Character-set search ---------------------------------------------
    def find_first_of(self, chars: Pattern, pos: int = 0) -> int:
        members = frozenset(_as_text(chars))
        return self._scan_forward(pos, lambda ch: ch in members)

    def find_last_of(self, chars: Pattern, pos: int = NPOS) -> int:
        members = frozenset(_as_text(chars))
        return self._scan_backward(pos, lambda ch: ch in members)

    def find_first_not_of(self, chars: Pattern, pos: int = 0) -> int:
        members = frozenset(_as_text(chars))
        return self._scan_forward(pos, lambda ch: ch not in members)

    def find_last_not_of(self, chars: Pattern, pos: int = NPOS) -> int:
        members = frozenset(_as_text(chars))
        return self._scan_backward(pos, lambda ch: ch not in members)

    def _scan_forward(self, pos: int, accept: Callable[[str], bool]) -> int:
        _check_pos(pos)
        for index in range(pos, self._size):
            if accept(self._source[self._offset + index]):
                return index
        return NPOS

    def _scan_backward(self, pos: int, accept: Callable[[str], bool]) -> int:
        _check_pos(pos)
        for index in range(min(pos, self._size - 1), -1, -1):
            if accept(self._source[self._offset + index]):
                return index
        return NPOS

    # Sub-views --------------------------------------------------------
    def substr(self, pos: int = 0, count: int = NPOS) -> "StringView":
        if not 0 <= pos <= self._size:
            raise ViewIndexError(f"Position {pos} out of range for view of size {self._size}")
        if count < 0:
            raise ViewIndexError(f"Count must be non-negative, got {count}")
        return StringView(self._source, min(count, self._size - pos), self._offset + pos)

    def remove_prefix(self, count: int) -> "StringView":
        if not 0 <= count <= self._size:
            raise ViewIndexError(f"Cannot remove {count} characters from view of size {self._size}")
        return StringView(self._source, self._size - count, self._offset + count)

    def remove_suffix(self, count: int) -> "StringView":
        if not 0 <= count <= self._size:
            raise ViewIndexError(f"Cannot remove {count} characters from view of size {self._size}")
        return StringView(self._source, self._size - count, self._offset)

    # Comparison -------------------------------------------------------
    def compare(self, other: Pattern) -> int:
        """Three-way comparison: negative, zero or positive."""

        mine, theirs = str(self), _as_text(other)
        return (mine > theirs) - (mine < theirs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (str, StringView)):
            return NotImplemented
        return str(self) == _as_text(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, (str, StringView)):
            return NotImplemented
        return str(self) < _as_text(other)

    def __hash__(self) -> int:
        return hash(str(self))


__all__ = ["NPOS", "Pattern", "StringView"]
