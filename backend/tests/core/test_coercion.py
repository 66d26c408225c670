"""Coercion tests: flat text <-> BodyValue classification and row conversion.

Tests cover:
    - Classification priority (container > bool substring > non-zero number > string)
    - JavaScript-compatible number parsing and formatting
    - Flat text of every BodyValue variant
    - Round trip of String, Number, Bool, Array and Object text
    - parse_body_value for already-decoded JSON
    - convert_row between flat and typed tables
"""

import pytest

from reqdeck.core.coercion import (
    canonical_json, convert_row, flat_text, flat_to_structured, format_number,
    load_json, needs_coercion, parse_body_value, parse_number, structured_to_flat,
)
from reqdeck.core.domain_types import BodyValueType, TableKind
from reqdeck.core.errors import ConversionFailure
from reqdeck.core.request_models import BodyRecord, BodyValue, Record


# --- flat_to_structured -----------------------------------------------------

def test_json_object_becomes_object():
    assert flat_to_structured('{"a": 1}') == BodyValue.mapping({"a": 1})


def test_json_array_becomes_array():
    assert flat_to_structured("[1, 2]") == BodyValue.array([1, 2])


def test_true_and_false_become_bool():
    assert flat_to_structured("true") == BodyValue.boolean(True)
    assert flat_to_structured("false") == BodyValue.boolean(False)


def test_bool_match_is_substring_and_case_insensitive():
    assert flat_to_structured("untrue") == BodyValue.boolean(True)
    assert flat_to_structured("FALSE alarm") == BodyValue.boolean(False)


def test_true_wins_when_both_words_present():
    assert flat_to_structured("false or true") == BodyValue.boolean(True)


def test_nonzero_number_becomes_number():
    value = flat_to_structured("42")
    assert value.type is BodyValueType.NUMBER
    assert value.value == 42
    assert isinstance(value.value, int)
    assert flat_to_structured("3.5") == BodyValue.number(3.5)


def test_zero_and_empty_stay_strings():
    assert flat_to_structured("0") == BodyValue.string("0")
    assert flat_to_structured("") == BodyValue.string("")


def test_plain_text_stays_string():
    assert flat_to_structured("hello") == BodyValue.string("hello")


def test_json_scalar_string_is_not_a_container():
    assert flat_to_structured('"quoted"') == BodyValue.string('"quoted"')


def test_malformed_json_falls_back():
    assert flat_to_structured("{not json") == BodyValue.string("{not json")


@pytest.mark.parametrize("text", ["Infinity", "-Infinity", "1e400"])
def test_out_of_range_numbers_stay_strings(text):
    assert flat_to_structured(text) == BodyValue.string(text)


def test_container_with_overflowing_number_stays_string():
    assert flat_to_structured("[1e400]") == BodyValue.string("[1e400]")


# --- numbers ----------------------------------------------------------------

def test_parse_number_follows_js_rules():
    assert parse_number("") == 0
    assert parse_number("  12 ") == 12
    assert parse_number("0x1f") == 31
    assert parse_number("0b101") == 5
    assert parse_number("1e3") == 1000
    assert parse_number("1_000") is None
    assert parse_number("nan") is None
    assert parse_number("inf") is None
    assert parse_number("12px") is None


def test_format_number_matches_js_tostring():
    assert format_number(5) == "5"
    assert format_number(2.5) == "2.5"
    assert format_number(10.0) == "10"
    assert format_number(1e-7) == "1e-7"
    assert format_number(float("inf")) == "Infinity"


# --- structured_to_flat -----------------------------------------------------

@pytest.mark.parametrize("value, text", [
    (BodyValue.string("abc"), "abc"),
    (BodyValue.number(7), "7"),
    (BodyValue.boolean(True), "true"),
    (BodyValue.boolean(False), "false"),
    (BodyValue.array([1, "a"]), '[1,"a"]'),
    (BodyValue.mapping({"k": {"n": 1}}), '{"k":{"n":1}}'),
])
def test_structured_to_flat(value, text):
    assert structured_to_flat(value) == text


@pytest.mark.parametrize("text", ["hello", "42", "true", "false", "[1,2]", '{"a":{"b":2}}'])
def test_flat_round_trip(text):
    assert structured_to_flat(flat_to_structured(text)) == text


# --- decoded JSON -----------------------------------------------------------

def test_parse_body_value_for_decoded_json():
    assert parse_body_value("12") == BodyValue.number(12)
    assert parse_body_value([1]) == BodyValue.array([1])
    assert parse_body_value({"a": 1}) == BodyValue.mapping({"a": 1})
    assert parse_body_value(False) == BodyValue.boolean(False)
    assert parse_body_value(5) == BodyValue.number(5)
    assert parse_body_value(0) == BodyValue.string("0")
    assert parse_body_value(None) == BodyValue.string("null")
    assert parse_body_value(float("inf")) == BodyValue.string("Infinity")


def test_flat_text_of_decoded_json():
    assert flat_text("x") == "x"
    assert flat_text(3) == "3"
    assert flat_text(True) == "true"
    assert flat_text(None) == "null"
    assert flat_text({"a": [1]}) == '{"a":[1]}'


def test_load_json_rejects_nan_literal():
    with pytest.raises(ConversionFailure):
        load_json("NaN")


def test_load_json_rejects_overflowing_float():
    with pytest.raises(ConversionFailure):
        load_json('{"n": 1e400}')


def test_canonical_json_is_compact():
    assert canonical_json({"a": [1, 2]}) == '{"a":[1,2]}'


# --- convert_row ------------------------------------------------------------

def test_needs_coercion_only_across_body_boundary():
    assert needs_coercion(TableKind.PARAMS, TableKind.BODY)
    assert needs_coercion(TableKind.BODY, TableKind.HEADERS)
    assert not needs_coercion(TableKind.PARAMS, TableKind.HEADERS)
    assert not needs_coercion(TableKind.BODY, TableKind.BODY)


def test_flat_row_to_body_wraps_as_string():
    row = Record("n", "42", is_active=True, position=3)
    converted = convert_row(row, TableKind.PARAMS, TableKind.BODY)
    assert isinstance(converted, BodyRecord)
    assert converted.value == BodyValue.string("42")
    assert converted.is_active is True


def test_body_row_to_flat_uses_flat_text():
    row = BodyRecord("n", BodyValue.number(3), is_active=True)
    converted = convert_row(row, TableKind.BODY, TableKind.HEADERS)
    assert isinstance(converted, Record)
    assert converted.value == "3"


def test_same_family_conversion_is_a_deep_copy():
    row = BodyRecord("o", BodyValue.mapping({"a": [1]}))
    converted = convert_row(row, TableKind.BODY, TableKind.BODY)
    assert converted == row
    assert converted is not row
    assert converted.value.value is not row.value.value
