"""Type Coercion: converts row values between flat text and the BodyValue variant.

Invariants:
    - structured_to_flat covers every BodyValueType (checked at import time)
    - flat_to_structured priority: JSON object/array > "true"/"false" substring > non-zero number > String
    - "" and "0" are never classified as Number; any text containing "true" or "false" is a Bool
    - Non-finite numbers ("Infinity", "1e400") are never stored as Number: they stay String
    - ConversionFailure never escapes this module: malformed JSON falls back to String
    - flat -> structured -> flat reproduces String text and canonical Number/Bool text

Design Decisions:
    - Number text follows JavaScript's Number()/toString() rules so documents written by
      earlier clients keep their exact cell text
    - Integral numbers are stored as int so canonical JSON never grows a trailing ".0"
    - Cross-table moves wrap flat text as String instead of classifying it: a drag never
      changes what the user typed
"""

import copy
import json
import math
import re
from typing import Any, Callable

from reqdeck.core.domain_types import BodyValueType, TableKind
from reqdeck.core.errors import ConversionFailure
from reqdeck.core.request_models import BodyRecord, BodyValue, Record, Row

_TRUE_PATTERN = re.compile("true", re.IGNORECASE)
_FALSE_PATTERN = re.compile("false", re.IGNORECASE)
_RADIX_PREFIXES: dict[str, int] = {"0x": 16, "0o": 8, "0b": 2}
_NON_JS_FLOAT_WORDS = frozenset({"inf", "infinity", "nan"})


# ─── JSON helpers ────────────────────────────────────────────────

def canonical_json(value: Any, indent: int | None = None) -> str:
    """JSON text in the compact form JSON.stringify produces (or indented)."""
    if indent:
        return json.dumps(value, ensure_ascii=False, indent=indent)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def load_json(text: str) -> Any:
    """Strict JSON parse (no NaN/Infinity literals or overflowing numbers). Raises ConversionFailure."""
    try:
        return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except (TypeError, ValueError) as e:
        raise ConversionFailure(f"Invalid JSON: {e}") from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"{text} is out of range")
    return number


def _load_container(text: str) -> list | dict | None:
    """Parsed value when text is a JSON array or object, else None."""
    try:
        parsed = load_json(text)
    except ConversionFailure:
        return None
    if isinstance(parsed, (list, dict)):
        return parsed
    return None


# ─── Numbers ─────────────────────────────────────────────────────

def parse_number(text: str) -> int | float | None:
    """JavaScript Number(text); None where that yields NaN."""
    stripped = text.strip()
    if stripped == "":
        return 0
    if "_" in stripped:
        return None
    prefix = stripped[:2].lower()
    if prefix in _RADIX_PREFIXES:
        try:
            return int(stripped[2:], _RADIX_PREFIXES[prefix])
        except ValueError:
            return None
    if stripped.lstrip("+-").lower() in _NON_JS_FLOAT_WORDS and stripped.lstrip("+-") != "Infinity":
        return None
    try:
        number = float(stripped)
    except ValueError:
        return None
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def _is_finite(number: int | float) -> bool:
    return isinstance(number, int) or math.isfinite(number)


def format_number(number: int | float) -> str:
    """JavaScript Number.prototype.toString() for the common cases."""
    if isinstance(number, bool):
        return "true" if number else "false"
    if isinstance(number, int):
        return str(number)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number).replace("e-0", "e-").replace("e+0", "e+")


# ─── Structured -> flat ──────────────────────────────────────────

_FLATTENERS: dict[BodyValueType, Callable[[Any], str]] = {
    BodyValueType.STRING: lambda v: "" if v is None else str(v),
    BodyValueType.NUMBER: format_number,
    BodyValueType.BOOL: lambda v: "true" if v else "false",
    BodyValueType.ARRAY: canonical_json,
    BodyValueType.OBJECT: canonical_json,
}
assert set(_FLATTENERS) == set(BodyValueType), "every BodyValueType needs a flattener"


def structured_to_flat(value: BodyValue) -> str:
    """Flat text of a body value, as shown in params/headers cells."""
    return _FLATTENERS[value.type](value.value)


# ─── Flat -> structured ──────────────────────────────────────────

def flat_to_structured(text: str) -> BodyValue:
    """Classify free text typed or pasted into a body cell."""
    container = _load_container(text)
    if container is not None:
        if isinstance(container, list):
            return BodyValue.array(container)
        return BodyValue.mapping(container)
    # Substring match, not equality: "untrue" is Bool(True)
    if _TRUE_PATTERN.search(text) or _FALSE_PATTERN.search(text):
        return BodyValue.boolean(bool(_TRUE_PATTERN.search(text)))
    number = parse_number(text)
    # Infinity has no JSON form, so it stays text
    if number and _is_finite(number):
        return BodyValue.number(number)
    return BodyValue.string(text)


def parse_body_value(data: Any) -> BodyValue:
    """Classify a value that may already be decoded JSON (raw-body editor input)."""
    if isinstance(data, str):
        return flat_to_structured(data)
    if isinstance(data, list):
        return BodyValue.array(data)
    if isinstance(data, dict):
        return BodyValue.mapping(data)
    if data is None:
        return BodyValue.string("null")
    if isinstance(data, bool):
        return BodyValue.boolean(data)
    if isinstance(data, (int, float)) and data and _is_finite(data):
        return BodyValue.number(data)
    return BodyValue.string(flat_text(data))


def flat_text(data: Any) -> str:
    """Text for an arbitrary decoded JSON value placed in a flat cell."""
    if isinstance(data, str):
        return data
    if isinstance(data, (bool, int, float)):
        return format_number(data)
    if data is None:
        return "null"
    return canonical_json(data)


# ─── Rows ────────────────────────────────────────────────────────

def row_text(row: Row) -> str:
    """Flat text of any row's value."""
    if isinstance(row, BodyRecord):
        return structured_to_flat(row.value)
    return row.value


def serialized_value(row: Row) -> str:
    """Stable text form of a row value for content comparison."""
    if isinstance(row, BodyRecord):
        return canonical_json({"type": row.value.type.value, "value": row.value.value})
    return canonical_json(row.value)


def needs_coercion(source_kind: TableKind, dest_kind: TableKind) -> bool:
    return source_kind.is_typed != dest_kind.is_typed


def convert_row(row: Row, source_kind: TableKind, dest_kind: TableKind) -> Row:
    """Deep clone of a row, retyped for the destination table kind."""
    if not needs_coercion(source_kind, dest_kind):
        return copy.deepcopy(row)
    if dest_kind.is_typed:
        return BodyRecord(
            key=row.key, value=BodyValue.string(row_text(row)),
            is_active=row.is_active, position=row.position,
        )
    return Record(
        key=row.key, value=row_text(row),
        is_active=row.is_active, position=row.position,
    )
