from __future__ import annotations

import copy
import logging
import pickle
from functools import singledispatch

import pytest

from accel.compat import (
    VARIANT_NPOS,
    Variant,
    check_visitor,
    in_place_index,
    in_place_type,
    visit,
)
from accel.core.errors import AccelError, AlternativeError, BadVariantAccess


class Exploding:
    def __init__(self, *args: object) -> None:
        raise ValueError("constructor failed")


class Shape:
    pass


class Circle(Shape):
    pass


class Square(Shape):
    pass


class Blob(Circle, Square):
    pass


def test_variant_should_dispatch_visitor_and_extract_active_alternative(number_or_text, number_visitor) -> None:
    value = number_or_text(in_place_type(float), 10)

    assert visit(number_visitor, value) == 2
    assert value.get(float) == 10
    with pytest.raises(BadVariantAccess):
        value.get(int)

    value.emplace(str, "Hello, World!")

    assert visit(number_visitor, value) == 3
    assert value.get(str) == "Hello, World!"
    with pytest.raises(BadVariantAccess):
        value.get(int)
    assert number_visitor.calls == ["float", "str"]


@pytest.mark.parametrize(
    ("alternative", "args", "expected"),
    [(int, (7,), 7), (float, (2.5,), 2.5), (str, ("abc",), "abc")],
)
def test_in_place_construction_should_round_trip_through_get(number_or_text, alternative, args, expected) -> None:
    value = number_or_text.in_place(alternative, *args)

    assert value.get(alternative) == expected
    assert value.holds_alternative(alternative)
    for other in number_or_text.alternatives:
        if other is alternative:
            continue
        with pytest.raises(BadVariantAccess):
            value.get(other)


def test_emplace_should_switch_active_alternative(number_or_text) -> None:
    value = number_or_text.in_place(int, 1)

    returned = value.emplace(float, 3)

    assert returned == 3.0
    assert value.index == 1
    assert value.get(float) == 3.0
    with pytest.raises(BadVariantAccess):
        value.get(int)


def test_bad_variant_access_should_be_a_type_error(number_or_text) -> None:
    value = number_or_text("text")
    with pytest.raises(TypeError):
        value.get(int)
    assert issubclass(BadVariantAccess, AccelError)


def test_failed_extraction_should_not_change_state(number_or_text) -> None:
    value = number_or_text(4)
    with pytest.raises(BadVariantAccess):
        value.get(str)
    assert value.index == 0
    assert value.get(int) == 4


def test_visitor_mapping_order_should_not_matter(number_or_text) -> None:
    handlers = {str: lambda v: "str", int: lambda v: "int", float: lambda v: "float"}

    assert visit(handlers, number_or_text(1)) == "int"
    assert visit(handlers, number_or_text(1.0)) == "float"
    assert number_or_text("x").visit(handlers) == "str"


def test_visit_should_use_active_index_not_runtime_type() -> None:
    flags = Variant[int, bool]
    handlers = {int: lambda v: "int", bool: lambda v: "bool"}

    assert visit(handlers, flags(True)) == "bool"
    assert visit(handlers, flags.in_place(int, 1)) == "int"


def test_visit_should_support_singledispatch(number_or_text) -> None:
    @singledispatch
    def describe(value: object) -> str:
        return "other"

    @describe.register
    def _(value: int) -> str:
        return f"int {value}"

    @describe.register
    def _(value: str) -> str:
        return f"str {value}"

    assert visit(describe, number_or_text(3)) == "int 3"
    assert visit(describe, number_or_text("a")) == "str a"
    assert visit(describe, number_or_text(1.5)) == "other"


def test_visit_should_accept_generic_callable(number_or_text) -> None:
    assert visit(repr, number_or_text("abc")) == "'abc'"
    assert visit(lambda v: v * 2, number_or_text(21)) == 42


def test_visitor_missing_handler_should_raise(number_or_text) -> None:
    with pytest.raises(AlternativeError):
        visit({int: lambda v: v, str: lambda v: v}, number_or_text(1))

    class Partial:
        def visit_int(self, value: int) -> int:
            return value

    with pytest.raises(AlternativeError):
        visit(Partial(), number_or_text(1))


def test_visitor_with_foreign_handler_should_raise(number_or_text) -> None:
    handlers = {int: str, float: str, str: str, bytes: str}
    with pytest.raises(AlternativeError):
        check_visitor(number_or_text, handlers)


def test_check_visitor_should_accept_complete_visitor(number_or_text, number_visitor) -> None:
    check_visitor(number_or_text, number_visitor)
    check_visitor(number_or_text, {int: str, float: str, str: str})


def test_get_should_reject_types_outside_alternatives(number_or_text) -> None:
    value = number_or_text(1)
    with pytest.raises(AlternativeError):
        value.get(bytes)
    with pytest.raises(AlternativeError):
        value.emplace(bytes, b"x")
    assert value.get(int) == 1
    with pytest.raises(AlternativeError):
        number_or_text.in_place(list)


def test_failed_emplace_should_leave_variant_valueless(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="accel.compat")
    fragile = Variant[int, Exploding]
    value = fragile(5)

    with pytest.raises(ValueError, match="constructor failed"):
        value.emplace(Exploding)

    assert value.valueless_by_exception
    assert value.index == VARIANT_NPOS
    with pytest.raises(BadVariantAccess):
        value.get(int)
    with pytest.raises(BadVariantAccess):
        value.get(Exploding)
    with pytest.raises(BadVariantAccess):
        visit(repr, value)
    assert value.get_if(int) is None
    assert "valueless" in repr(value)
    assert any(record.getMessage() == "Variant emplace failed, variant is valueless" for record in caplog.records)

    value.emplace(int, 9)
    assert not value.valueless_by_exception
    assert value.get(int) == 9


def test_failed_in_place_construction_should_propagate() -> None:
    with pytest.raises(ValueError):
        Variant[int, Exploding].in_place(Exploding)


def test_default_construction_should_use_first_alternative(number_or_text) -> None:
    value = number_or_text()
    assert value.index == 0
    assert value.get(int) == 0


def test_converting_construction_should_pick_matching_alternative(number_or_text) -> None:
    assert number_or_text("s").index == 2
    assert number_or_text(1.5).index == 1
    with pytest.raises(AlternativeError):
        number_or_text([1, 2])


def test_converting_construction_should_store_value_unconverted(number_or_text) -> None:
    value = number_or_text(True)
    assert value.index == 0
    assert value.get(int) is True


def test_converting_construction_should_prefer_exact_type_and_reject_ambiguity() -> None:
    shapes = Variant[Shape, Circle]
    assert shapes(Circle()).index == 1
    assert shapes(Square()).index == 0

    with pytest.raises(AlternativeError):
        Variant[Circle, Square](Blob())


def test_construction_with_extra_arguments_should_require_tag(number_or_text) -> None:
    with pytest.raises(TypeError):
        number_or_text(1, 2)
    with pytest.raises(TypeError):
        number_or_text("a", encoding="utf-8")


def test_index_based_operations(number_or_text) -> None:
    value = number_or_text(in_place_index(2), "abc")
    assert value.get_at(2) == "abc"
    assert number_or_text.in_place_index(0, 4).get(int) == 4

    value.emplace_at(1, 0.5)
    assert value.get(float) == 0.5
    with pytest.raises(BadVariantAccess):
        value.get_at(2)
    with pytest.raises(AlternativeError):
        value.get_at(3)
    with pytest.raises(AlternativeError):
        value.emplace_at(-1)


def test_get_if_should_return_none_for_inactive(number_or_text) -> None:
    value = number_or_text(3)
    assert value.get_if(int) == 3
    assert value.get_if(str) is None


def test_get_should_return_stored_object(number_or_text) -> None:
    holder = Variant[list, dict]([1])
    holder.get(list).append(2)
    assert holder.get(list) == [1, 2]


def test_copy_should_preserve_alternative_and_value(number_or_text) -> None:
    original = number_or_text.in_place(float, 1.25)

    for duplicate in (number_or_text(original), copy.copy(original), copy.deepcopy(original)):
        assert type(duplicate) is number_or_text
        assert duplicate.index == 1
        assert duplicate.get(float) == 1.25
        assert duplicate == original


def test_deepcopy_should_not_share_mutable_value() -> None:
    holder = Variant[list, str]
    original = holder([1, 2])
    duplicate = copy.deepcopy(original)
    duplicate.get(list).append(3)
    assert original.get(list) == [1, 2]


def test_deepcopy_should_preserve_self_reference() -> None:
    original = Variant[list, str]([])
    original.get(list).append(original)

    duplicate = copy.deepcopy(original)

    assert duplicate is not original
    assert duplicate.get(list)[0] is duplicate


def test_moved_from_should_transfer_value_and_leave_source_valueless() -> None:
    holder = Variant[list, str]
    payload = [1]
    source = holder(payload)

    moved = holder.moved_from(source)

    assert moved.get(list) is payload
    assert source.valueless_by_exception
    with pytest.raises(AlternativeError):
        Variant[int, str].moved_from(moved)


def test_copy_of_valueless_variant_should_be_valueless() -> None:
    fragile = Variant[int, Exploding]
    value = fragile(1)
    with pytest.raises(ValueError):
        value.emplace(Exploding)
    assert copy.copy(value).valueless_by_exception
    assert copy.copy(value) == value


def test_pickle_should_round_trip(number_or_text) -> None:
    value = number_or_text.in_place(str, "pickled")
    restored = pickle.loads(pickle.dumps(value))
    assert type(restored) is number_or_text
    assert restored.get(str) == "pickled"


def test_equality_and_hashing(number_or_text) -> None:
    assert number_or_text(1) == number_or_text(1)
    assert number_or_text(1) != number_or_text(1.0)
    assert number_or_text(1) != Variant[int, str](1)
    with pytest.raises(TypeError):
        hash(number_or_text(1))


def test_repr_should_name_active_alternative(number_or_text) -> None:
    assert repr(number_or_text(2)) == "Variant[int, float, str](int: 2)"


def test_definitions_should_be_cached_and_validated() -> None:
    assert Variant[int, str] is Variant.of(int, str)
    assert Variant[int, str] is not Variant[str, int]
    assert Variant[int, str].alternative_count() == 2

    with pytest.raises(AlternativeError):
        Variant.of()
    with pytest.raises(AlternativeError):
        Variant[int, int]
    with pytest.raises(AlternativeError):
        Variant.of(int, "str")
    with pytest.raises(AlternativeError):
        Variant.of(int, [1])
    with pytest.raises(AlternativeError):
        Variant[int, str][float]
    with pytest.raises(AlternativeError):
        Variant(1)


def test_named_subclass_should_keep_alternatives() -> None:
    class Number(Variant[int, float]):
        pass

    value = Number(2.0)
    assert value.get(float) == 2.0
    assert visit({int: lambda v: "i", float: lambda v: "f"}, value) == "f"
