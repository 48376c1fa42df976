# tests/test_serialization.py
"""
Tests for the serialization helpers.

These tests verify:
- String pass-through when dates are off
- JSON encoding of nested values and datetimes
- Date revival at any depth
- The strict timestamp pattern
- Fallback for raw (non-JSON) strings
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from objectstore import serialization
from objectstore.exceptions import SerializationError
from objectstore.serialization import (
    date_reviver,
    deserialize,
    format_date,
    is_serialized_date,
    is_string,
    serialize,
)

UTC = timezone.utc


class TestIsString:
    """is_string() checks."""

    def test_plain_string(self):
        assert is_string("abc")
        assert is_string("")

    def test_string_subclass(self):
        class Name(str):
            pass

        assert is_string(Name("boxed"))

    @pytest.mark.parametrize("value", [None, 1, 1.5, b"bytes", ["a"], {"a": "b"}])
    def test_non_strings(self, value):
        assert not is_string(value)


class TestSerialize:
    """serialize() behavior."""

    def test_string_unchanged_without_dates(self):
        assert serialize("hello", dates=False) == "hello"

    def test_string_quoted_with_dates(self):
        assert serialize("hello", dates=True) == '"hello"'

    def test_nested_structure(self):
        text = serialize({"arr": [1, 2, "five"], "obj": {"ok": True, "none": None}})
        assert deserialize(text) == {"arr": [1, 2, "five"], "obj": {"ok": True, "none": None}}

    def test_aware_datetime_converted_to_utc(self):
        tz = timezone(timedelta(hours=-5))
        value = datetime(1981, 12, 19, 23, 0, 14, 250000, tzinfo=tz)

        assert serialize(value) == '"1981-12-20T04:00:14.250Z"'

    def test_naive_datetime_taken_as_utc(self):
        assert serialize(datetime(2020, 1, 2, 3, 4, 5)) == '"2020-01-02T03:04:05.000Z"'

    def test_sub_millisecond_truncated(self):
        assert format_date(datetime(2020, 1, 1, 0, 0, 0, 123999, tzinfo=UTC)) == "2020-01-01T00:00:00.123Z"

    def test_datetime_encoded_even_without_date_revival(self):
        value = {"when": datetime(2020, 1, 1, tzinfo=UTC)}
        assert serialize(value, dates=False) == '{"when": "2020-01-01T00:00:00.000Z"}'

    def test_plain_date(self):
        assert serialize(date(2021, 6, 30)) == '"2021-06-30"'

    def test_unencodable_value(self):
        with pytest.raises(SerializationError):
            serialize({"obj": object()})


class TestDeserialize:
    """deserialize() behavior."""

    def test_revives_dates_at_any_depth(self):
        when = datetime(2023, 3, 4, 5, 6, 7, 89000, tzinfo=UTC)
        text = serialize({"a": [{"b": when}], "c": when})

        result = deserialize(text, dates=True)

        assert result == {"a": [{"b": when}], "c": when}
        assert result["c"].tzinfo is not None

    def test_no_revival_without_dates(self):
        text = serialize({"when": datetime(2023, 3, 4, tzinfo=UTC)})
        assert deserialize(text, dates=False) == {"when": "2023-03-04T00:00:00.000Z"}

    def test_strings_matching_pattern_are_revived(self):
        """Known imprecision: any matching string becomes a datetime."""
        result = deserialize('{"label": "2000-01-01T00:00:00.000Z"}')
        assert isinstance(result["label"], datetime)

    def test_raw_string_returned_as_is(self):
        assert deserialize("not json at all", dates=False) == "not json at all"

    def test_top_level_date(self):
        assert deserialize('"2000-01-01T00:00:00.000Z"') == datetime(2000, 1, 1, tzinfo=UTC)


class TestDatePattern:
    """The strict UTC millisecond timestamp pattern."""

    @pytest.mark.parametrize(
        "value",
        [
            "1981-12-20T04:00:14.000Z",
            "2024-02-29T23:59:59.999Z",
        ],
    )
    def test_matches(self, value):
        assert is_serialized_date(value)
        assert isinstance(date_reviver(value), datetime)

    @pytest.mark.parametrize(
        "value",
        [
            "1981-12-20T04:00:14Z",
            "1981-12-20T04:00:14.000",
            "1981-12-20T04:00:14.000+00:00",
            "1981-12-20 04:00:14.000Z",
            "81-12-20T04:00:14.000Z",
            "1981-12-20T04:00:14.0000Z",
            " 1981-12-20T04:00:14.000Z",
        ],
    )
    def test_rejects(self, value):
        assert not is_serialized_date(value)
        assert date_reviver(value) == value

    def test_non_strings_pass_through(self):
        assert date_reviver(42) == 42
        assert not is_serialized_date(None)


class TestRoundTrip:
    """Values survive serialize → deserialize with dates enabled."""

    def test_mixed_payload(self):
        value = {
            "arr": [1, 2, 4.3343433, "five"],
            "obj": {"prop": "prop", "date": datetime(2022, 8, 1, 12, 30, 0, 500000, tzinfo=UTC)},
            "flag": False,
            "nothing": None,
        }
        assert deserialize(serialize(value, True), True) == value

    def test_offset_datetime_equal_after_round_trip(self):
        tz = timezone(timedelta(hours=9, minutes=30))
        value = datetime(2022, 8, 1, 12, 30, 0, 500000, tzinfo=tz)

        assert deserialize(serialize(value, True), True) == value

    def test_year_below_1000_is_zero_padded(self):
        value = datetime(999, 3, 4, 5, 6, 7, 8000, tzinfo=UTC)

        encoded = serialize(value, True)

        assert encoded == '"0999-03-04T05:06:07.008Z"'
        assert deserialize(encoded, True) == value

    def test_naive_datetime_comes_back_as_utc(self):
        """Naive datetimes are stored as UTC and revived as aware UTC values."""
        value = datetime(2020, 1, 2, 3, 4, 5, 6000)

        revived = deserialize(serialize(value, True), True)

        assert revived == value.replace(tzinfo=timezone.utc)
        assert revived.tzinfo is timezone.utc

    def test_module_exposed_on_store(self):
        from objectstore import Store

        assert Store.utils is serialization
