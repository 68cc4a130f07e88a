"""Discriminated union over a fixed, ordered set of alternative types.

A concrete union is defined once per alternative tuple, either with
``Variant[int, float, str]`` or ``Variant.of(int, float, str)``. Instances
hold exactly one value together with the index of its alternative; the
index, not ``type(value)``, drives extraction and visitor dispatch.

The only state outside the alternative set is *valueless*, reached when the
constructor called by :meth:`Variant.emplace` raises. A valueless variant
rejects every extraction and visit until the next successful emplace.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Tuple

from accel.core.errors import AlternativeError, BadVariantAccess
from accel.core.types import NPOS, Handler, Index

logger = logging.getLogger("accel.compat")

VARIANT_NPOS: Index = NPOS

_DEFINITIONS: Dict[Tuple[type, Tuple[type, ...]], type] = {}


@dataclass(frozen=True, slots=True)
class InPlaceType:
    """Tag selecting the alternative to construct by its type."""

    type: type


@dataclass(frozen=True, slots=True)
class InPlaceIndex:
    """Tag selecting the alternative to construct by its position."""

    index: int


def in_place_type(alternative: type) -> InPlaceType:
    return InPlaceType(alternative)


def in_place_index(index: int) -> InPlaceIndex:
    return InPlaceIndex(index)


def _validate_alternatives(alternatives: Tuple[type, ...]) -> None:
    if not alternatives:
        raise AlternativeError("A variant needs at least one alternative")
    for alternative in alternatives:
        if not isinstance(alternative, type):
            raise AlternativeError(f"Variant alternatives must be classes, got {alternative!r}")
    if len(set(alternatives)) != len(alternatives):
        raise AlternativeError(f"Variant alternatives must be distinct: {alternatives!r}")


def _type_name(alternative: type) -> str:
    return alternative.__name__


def _method_name(alternative: type) -> str:
    return f"visit_{alternative.__name__}"


class Variant:
    """Type-safe union holding one value from :attr:`alternatives`.

    Construction forms:

    * ``V()`` default-constructs the first alternative.
    * ``V(value)`` stores ``value`` under the alternative whose type is
      exactly ``type(value)``, falling back to the single alternative it is
      an instance of. The value is stored as given, not converted, so
      ``Variant[int, str](True)`` holds ``True`` under the ``int`` alternative.
    * ``V(in_place_type(T), *args)`` / ``V.in_place(T, *args)`` stores
      ``T(*args)``; ``in_place_index`` / ``V.in_place_index`` select by
      position instead.
    * ``V(other)`` copies another instance of the same union.
    """

    __slots__ = ("_index", "_value")

    alternatives: ClassVar[Tuple[type, ...]] = ()

    # Definition -------------------------------------------------------
    def __class_getitem__(cls, item: Any) -> type["Variant"]:
        alternatives = item if isinstance(item, tuple) else (item,)
        return cls.of(*alternatives)

    @classmethod
    def of(cls, *alternatives: type) -> type["Variant"]:
        """Return the union class for ``alternatives`` (cached per tuple)."""

        if cls.alternatives:
            raise AlternativeError(f"{cls.__name__} already has a fixed alternative set")
        key = (cls, tuple(alternatives))
        _validate_alternatives(key[1])
        defined = _DEFINITIONS.get(key)
        if defined is None:
            name = f"{cls.__name__}[{', '.join(_type_name(alt) for alt in key[1])}]"
            defined = type(
                name,
                (cls,),
                {"__slots__": (), "__module__": cls.__module__, "alternatives": key[1]},
            )
            _DEFINITIONS[key] = defined
        return defined

    @classmethod
    def alternative_count(cls) -> int:
        return len(cls.alternatives)

    # Construction -----------------------------------------------------
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        if not self.alternatives:
            raise AlternativeError("Variant has no alternatives; define one with Variant[...] first")
        self._index: int = VARIANT_NPOS
        self._value: Any = None
        if args and isinstance(args[0], InPlaceType):
            self._construct(self._index_of(args[0].type), args[1:], kwargs)
        elif args and isinstance(args[0], InPlaceIndex):
            self._construct(self._checked_index(args[0].index), args[1:], kwargs)
        elif kwargs or len(args) > 1:
            raise TypeError(
                f"{type(self).__name__} takes a single value; use in_place_type() to pass constructor arguments"
            )
        elif not args:
            self._construct(0, (), {})
        elif type(args[0]) is type(self):
            source = args[0]
            self._index = source._index
            self._value = copy.copy(source._value)
        else:
            self._index = self._select_alternative(args[0])
            self._value = args[0]

    @classmethod
    def in_place(cls, alternative: type, *args: Any, **kwargs: Any) -> "Variant":
        return cls(InPlaceType(alternative), *args, **kwargs)

    @classmethod
    def in_place_index(cls, index: int, *args: Any, **kwargs: Any) -> "Variant":
        return cls(InPlaceIndex(index), *args, **kwargs)

    @classmethod
    def moved_from(cls, other: "Variant") -> "Variant":
        """Take over ``other``'s value without copying; ``other`` becomes valueless."""

        if type(other) is not cls:
            raise AlternativeError(f"Cannot move {type(other).__name__} into {cls.__name__}")
        moved = cls.__new__(cls)
        moved._index, moved._value = other._index, other._value
        other._index, other._value = VARIANT_NPOS, None
        return moved

    def _construct(self, index: int, args: Tuple[Any, ...], kwargs: Mapping[str, Any]) -> None:
        self._value = self.alternatives[index](*args, **kwargs)
        self._index = index

    def _select_alternative(self, value: Any) -> int:
        for index, alternative in enumerate(self.alternatives):
            if type(value) is alternative:
                return index
        matches = [index for index, alternative in enumerate(self.alternatives) if isinstance(value, alternative)]
        if len(matches) == 1:
            return matches[0]
        if not matches:
            raise AlternativeError(f"{type(value).__name__} is not an alternative of {type(self).__name__}")
        raise AlternativeError(
            f"{type(value).__name__} matches several alternatives of {type(self).__name__}: "
            f"{[_type_name(self.alternatives[i]) for i in matches]}"
        )

    # Lookup -----------------------------------------------------------
    def _index_of(self, alternative: type) -> int:
        try:
            return self.alternatives.index(alternative)
        except ValueError as exc:
            raise AlternativeError(
                f"{alternative!r} is not an alternative of {type(self).__name__}"
            ) from exc

    def _checked_index(self, index: int) -> int:
        if not 0 <= index < len(self.alternatives):
            raise AlternativeError(
                f"Alternative index {index} out of range for {type(self).__name__}"
            )
        return index

    @property
    def index(self) -> int:
        """Position of the active alternative, ``VARIANT_NPOS`` when valueless."""

        return self._index

    @property
    def valueless_by_exception(self) -> bool:
        return self._index == VARIANT_NPOS

    def holds_alternative(self, alternative: type) -> bool:
        return self._index_of(alternative) == self._index

    def get(self, alternative: type) -> Any:
        """Return the stored value if ``alternative`` is active.

        Raises :class:`BadVariantAccess` otherwise, including when the variant
        is valueless. No conversion between alternatives is attempted.
        """

        return self._checked_get(self._index_of(alternative))

    def get_at(self, index: int) -> Any:
        return self._checked_get(self._checked_index(index))

    def get_if(self, alternative: type) -> Any | None:
        if self._index_of(alternative) != self._index:
            return None
        return self._value

    def _checked_get(self, index: int) -> Any:
        if index != self._index:
            raise BadVariantAccess(
                f"{_type_name(self.alternatives[index])} is not the active alternative "
                f"of {type(self).__name__} (active: {self._active_name()})"
            )
        return self._value

    def _active_name(self) -> str:
        if self.valueless_by_exception:
            return "valueless"
        return _type_name(self.alternatives[self._index])

    # Mutation ---------------------------------------------------------
    def emplace(self, alternative: type, *args: Any, **kwargs: Any) -> Any:
        """Replace the active value with ``alternative(*args, **kwargs)``.

        The old value is released before the new one is constructed; if the
        constructor raises, the variant stays valueless and the error
        propagates.
        """

        return self._replace(self._index_of(alternative), args, kwargs)

    def emplace_at(self, index: int, *args: Any, **kwargs: Any) -> Any:
        return self._replace(self._checked_index(index), args, kwargs)

    def _replace(self, index: int, args: Tuple[Any, ...], kwargs: Mapping[str, Any]) -> Any:
        self._index, self._value = VARIANT_NPOS, None
        try:
            self._construct(index, args, kwargs)
        except Exception:
            logger.debug(
                "Variant emplace failed, variant is valueless",
                extra={
                    "variant": type(self).__name__,
                    "alternative": _type_name(self.alternatives[index]),
                },
            )
            raise
        return self._value

    # Visitation -------------------------------------------------------
    def visit(self, visitor: Any) -> Any:
        return visit(visitor, self)

    # Value protocol ---------------------------------------------------
    def __copy__(self) -> "Variant":
        return type(self)(self)

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Variant":
        duplicate = type(self).__new__(type(self))
        memo[id(self)] = duplicate
        duplicate._index = self._index
        duplicate._value = copy.deepcopy(self._value, memo)
        return duplicate

    def __reduce__(self) -> Tuple[Any, ...]:
        cls = type(self)
        base = cls.__base__
        # Classes made by ``of`` are not importable; rebuild them from their definition.
        if _DEFINITIONS.get((base, cls.alternatives)) is cls:
            return (_rebuild, ((base, cls.alternatives), self._index, self._value))
        return (_rebuild, (cls, self._index, self._value))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._index == other._index and self._value == other._value  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.valueless_by_exception:
            return f"{type(self).__name__}(valueless)"
        return f"{type(self).__name__}({self._active_name()}: {self._value!r})"


def _rebuild(definition: Any, index: int, value: Any) -> Variant:
    if isinstance(definition, tuple):
        base, alternatives = definition
        cls = base.of(*alternatives)
    else:
        cls = definition
    rebuilt = cls.__new__(cls)
    rebuilt._index, rebuilt._value = index, value
    return rebuilt


def check_visitor(variant_cls: type[Variant], visitor: Any) -> None:
    """Raise :class:`AlternativeError` unless ``visitor`` covers each alternative once.

    Applies to mapping visitors (``{type: callable}``) and to objects
    exposing ``visit_<TypeName>`` methods. Other callables are generic and
    accept every alternative.
    """

    alternatives = variant_cls.alternatives
    if isinstance(visitor, Mapping):
        missing = [alt for alt in alternatives if alt not in visitor]
        extra = [key for key in visitor if key not in alternatives]
        if extra:
            raise AlternativeError(
                f"Visitor handles types outside {variant_cls.__name__}: {extra!r}"
            )
    else:
        names = [_method_name(alt) for alt in alternatives]
        if len(set(names)) != len(names):
            raise AlternativeError(
                f"Alternatives of {variant_cls.__name__} share a name; use a mapping visitor"
            )
        missing = [alt for alt in alternatives if not callable(getattr(visitor, _method_name(alt), None))]
    if missing:
        raise AlternativeError(
            f"Visitor for {variant_cls.__name__} has no handler for {[_type_name(alt) for alt in missing]}"
        )


def _is_singledispatch(visitor: Any) -> bool:
    return callable(getattr(visitor, "dispatch", None)) and hasattr(visitor, "registry")


def _has_visit_methods(visitor: Any, alternatives: Tuple[type, ...]) -> bool:
    return any(callable(getattr(visitor, _method_name(alt), None)) for alt in alternatives)


def _resolve_handler(visitor: Any, variant_cls: type[Variant], alternative: type) -> Handler:
    if isinstance(visitor, Mapping):
        check_visitor(variant_cls, visitor)
        return visitor[alternative]
    if _is_singledispatch(visitor):
        return visitor.dispatch(alternative)
    if _has_visit_methods(visitor, variant_cls.alternatives):
        check_visitor(variant_cls, visitor)
        return getattr(visitor, _method_name(alternative))
    if callable(visitor):
        return visitor
    raise AlternativeError(f"{type(visitor).__name__} cannot visit {variant_cls.__name__}")


def visit(visitor: Any, variant: Variant) -> Any:
    """Invoke the handler for the active alternative and return its result.

    ``visitor`` may be a mapping from alternative type to callable, a
    :func:`functools.singledispatch` function, an object with
    ``visit_<TypeName>`` methods, or a plain callable accepting any
    alternative. The handler is chosen from the variant's active index.
    """

    if variant.valueless_by_exception:
        raise BadVariantAccess(f"Cannot visit a valueless {type(variant).__name__}")
    alternative = variant.alternatives[variant.index]
    handler = _resolve_handler(visitor, type(variant), alternative)
    return handler(variant.get_at(variant.index))


__all__ = [
    "InPlaceIndex",
    "InPlaceType",
    "VARIANT_NPOS",
    "Variant",
    "check_visitor",
    "in_place_index",
    "in_place_type",
    "visit",
]
