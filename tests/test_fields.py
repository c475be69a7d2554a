"""
Field extraction tests.

Validates the Fields helper used inside hand-written try_construct_from
implementations.
"""

import pytest

import wjp
from wjp import Fields
from wjp import Value


@pytest.fixture
def members() -> Fields:
    """
    Provides the members of a small struct.
    """
    return Fields.of(
        wjp.parse('{"name": "gauge", "size": 3, "tags": ["a"], "note": null}')
    )


def test_of_requires_struct() -> None:
    """
    Validates only structs can be opened.
    """
    with pytest.raises(wjp.KindMismatchError) as exc_info:
        Fields.of(Value.array())

    assert exc_info.value.expected is wjp.ValueKind.STRUCT
    assert exc_info.value.actual is wjp.ValueKind.ARRAY


def test_get_leaves_member(members: Fields) -> None:
    """
    Validates get reads without removing.
    """
    assert members.get("name", Value.as_string) == "gauge"
    assert members.get("name", Value.as_string) == "gauge"
    assert "name" in members
    assert len(members) == 4


def test_get_errors(members: Fields) -> None:
    """
    Validates missing and mismatched members.
    """
    with pytest.raises(wjp.MissingFieldError) as missing:
        members.get("absent", Value.as_string)
    assert missing.value.field == "absent"
    assert str(missing.value) == "missing field 'absent'"

    with pytest.raises(wjp.InvalidFieldError) as invalid:
        members.get("size", Value.as_string)
    assert invalid.value.field == "size"
    assert invalid.value.actual is wjp.ValueKind.NUMBER


def test_get_optional(members: Fields) -> None:
    """
    Validates get_optional yields None for absent or mismatched members.
    """
    assert members.get_optional("size", Value.as_number) == 3.0
    assert members.get_optional("size", Value.as_string) is None
    assert members.get_optional("absent", Value.as_string) is None


def test_take_removes_member(members: Fields) -> None:
    """
    Validates take consumes the member it reads.
    """
    assert members.take("size", Value.as_number) == 3.0
    assert "size" not in members

    with pytest.raises(wjp.MissingFieldError):
        members.take("size", Value.as_number)


def test_take_as(members: Fields) -> None:
    """
    Validates take_as constructs the requested type.
    """
    assert members.take_as("tags", list[str]) == ["a"]
    assert members.take_as("size", wjp.U8) == 3


def test_take_as_error_names_field(members: Fields) -> None:
    """
    Validates conversion errors propagate with a note naming the field.
    """
    with pytest.raises(wjp.KindMismatchError) as exc_info:
        members.take_as("name", float)

    assert exc_info.value.__notes__ == ["in field 'name'"]


def test_take_optional(members: Fields) -> None:
    """
    Validates absent and null members yield None.
    """
    assert members.take_optional("note", str) is None
    assert members.take_optional("absent", str) is None
    assert members.take_optional("name", str) == "gauge"
    assert "note" not in members


def test_take_with(members: Fields) -> None:
    """
    Validates take_with applies a conversion function.
    """
    assert members.take_with("name", lambda value: value.as_string().upper()) == (
        "PROBE"
    )


def test_take_with_wraps_foreign_errors(members: Fields) -> None:
    """
    Validates exceptions other than ConversionError are wrapped and chained.
    """

    def explode(value: Value) -> None:
        raise RuntimeError("no good")

    with pytest.raises(wjp.ConversionError) as exc_info:
        members.take_with("size", explode)

    assert "no good" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_take_with_keeps_conversion_errors(members: Fields) -> None:
    """
    Validates ConversionError raised by the function propagates unchanged.
    """
    with pytest.raises(wjp.KindMismatchError) as exc_info:
        members.take_with("tags", lambda value: wjp.construct(str, value))

    assert exc_info.value.__notes__ == ["in field 'tags'"]


def test_remaining_and_ensure_consumed(members: Fields) -> None:
    """
    Validates leftover members can be listed and rejected.
    """
    members.take("name", Value.as_string)
    members.take("size", Value.as_number)
    assert sorted(members.remaining()) == ["note", "tags"]

    with pytest.raises(wjp.UnexpectedFieldError) as exc_info:
        members.ensure_consumed()
    assert exc_info.value.fields == ["note", "tags"]

    members.take_optional("note", str)
    members.take_as("tags", list[str])
    members.ensure_consumed()


def test_original_value_untouched() -> None:
    """
    Validates taking members does not alter the struct they came from.
    """
    value = wjp.parse('{"a": 1}')
    Fields.of(value).take("a", Value.as_number)
    assert value.as_struct() == {"a": Value.number(1)}
