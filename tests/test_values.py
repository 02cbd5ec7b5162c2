from datetime import timedelta
from types import SimpleNamespace

import pytest

from argtree import Default, Kind, Settable, Value, values, with_default


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1", True),
        ("t", True),
        ("true", True),
        ("TRUE", True),
        ("y", True),
        ("Yes", True),
        ("0", False),
        ("f", False),
        ("false", False),
        ("n", False),
        ("NO", False),
    ],
)
def test_bool(raw, expected):
    value = values.Bool()
    value.set(raw)
    assert value.value is expected


@pytest.mark.parametrize("raw", ["", "2", "maybe", "truthy"])
def test_bool_invalid(raw):
    with pytest.raises(ValueError):
        values.Bool().set(raw)


def test_negated_bool():
    value = values.NegatedBool()
    value.set("true")
    assert value.value is False
    value.set("false")
    assert value.value is True
    assert value.is_boolean


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("27", 27),
        ("-27", -27),
        ("0", 0),
        ("0x1F", 31),
        ("0o17", 15),
        ("0b101", 5),
    ],
)
def test_int(raw, expected):
    value = values.Int()
    value.set(raw)
    assert value.value == expected


@pytest.mark.parametrize("raw", ["", "foo", "1.5", "010", " 1", "1 ", "1_000", "0x_10"])
def test_int_invalid(raw):
    with pytest.raises(ValueError):
        values.Int().set(raw)


@pytest.mark.parametrize("raw, expected", [("0", 0), ("27", 27), ("0x10", 16), ("+3", 3)])
def test_uint(raw, expected):
    value = values.UInt()
    value.set(raw)
    assert value.value == expected


@pytest.mark.parametrize("raw", ["-1", "-0x10", "", "one", " 1"])
def test_uint_invalid(raw):
    with pytest.raises(ValueError, match="unsigned int"):
        values.UInt().set(raw)


def test_uints_accumulate():
    value = values.UInts()
    value.set("1")
    value.set("2")
    assert value.value == [1, 2]
    assert value.is_aggregate


def test_float():
    value = values.Float()
    value.set("3.25")
    assert value.value == 3.25
    with pytest.raises(ValueError):
        value.set("three")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0", timedelta()),
        ("1s", timedelta(seconds=1)),
        ("1.5s", timedelta(seconds=1.5)),
        ("300ms", timedelta(milliseconds=300)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("-2m", timedelta(minutes=-2)),
        ("+1d", timedelta(days=1)),
        ("2w", timedelta(weeks=2)),
        ("250us", timedelta(microseconds=250)),
        ("1m30s500ms", timedelta(minutes=1, seconds=30, milliseconds=500)),
    ],
)
def test_duration(raw, expected):
    value = values.Duration()
    value.set(raw)
    assert value.value == expected


@pytest.mark.parametrize("raw", ["", "-", "5", "1x", "h", "1h 30m", "99999999999999999h", "1" + "0" * 400 + "s"])
def test_duration_invalid(raw):
    with pytest.raises(ValueError):
        values.Duration().set(raw)


def test_scalar_overwrites():
    value = values.String()
    value.set("one")
    value.set("two")
    assert value.value == "two"


def test_aggregate_accumulates():
    value = values.Ints()
    assert value.value == []
    value.set("1")
    value.set("2")
    assert value.value == [1, 2]
    assert value.is_aggregate
    assert not value.is_boolean


def test_aggregate_initial_list_is_extended():
    value = values.Strings(["a"])
    value.set("b")
    assert value.value == ["a", "b"]


def test_failed_set_keeps_previous_value():
    value = values.Int(5)
    with pytest.raises(ValueError):
        value.set("nope")
    assert value.value == 5


def test_value_writes_attribute():
    config = SimpleNamespace(count=0)
    value = values.Int(target=config, dest="count")
    value.set("7")
    assert config.count == 7
    assert value.value == 7


def test_value_writes_mapping():
    config = {}
    value = values.Strings(target=config, dest="names")
    value.set("a")
    value.set("b")
    assert config == {"names": ["a", "b"]}


def test_value_target_requires_dest():
    with pytest.raises(ValueError):
        values.Int(target={})


def test_custom_value():
    value = Value(str.upper)
    value.set("shout")
    assert value.value == "SHOUT"
    assert value.kind is Kind.PLAIN


def test_values_are_settable():
    assert isinstance(values.Int(), Settable)
    assert isinstance(with_default(values.Int(), "1"), Settable)


def test_default_delegates():
    inner = values.Bool()
    value = with_default(inner, "true")
    assert value.kind is Kind.BOOLEAN
    assert value.is_boolean
    assert not value.is_aggregate
    assert value.defaults == ("true",)

    value.set("true")
    assert inner.value is True
    assert value.value is True


def test_default_apply_in_order():
    value = with_default(values.Ints(), "1", "2", "3")
    value.apply_default()
    assert value.value == [1, 2, 3]


def test_default_apply_stops_at_first_failure():
    value = with_default(values.Ints(), "1", "bad", "3")
    with pytest.raises(ValueError):
        value.apply_default()
    assert value.value == [1]


def test_default_multiple_requires_aggregate():
    with pytest.raises(ValueError):
        Default(values.Int(), ("1", "2"))


def test_default_defaults_are_tuple():
    value = Default(values.Strings(), ["a", "b"])
    assert value.defaults == ("a", "b")
