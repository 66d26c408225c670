"""Table invariant tests: sentinel placement, positions, typed sentinels.

Tests cover:
    - Empty tables get exactly one sentinel
    - Interior empty-key rows are dropped, the last one survives
    - Positions always mirror array order
    - Sentinel type follows the table kind
"""

from reqdeck.core.domain_types import BodyValueType, TableKind
from reqdeck.core.request_models import BodyRecord, BodyValue, Record
from reqdeck.core.table_invariants import (
    content_length, is_sentinel, new_sentinel, normalize_table, table_is_normalized,
)


def _keys(rows):
    return [row.key for row in rows]


# --- Sentinel creation ------------------------------------------------------

def test_empty_params_table_gets_flat_sentinel():
    rows = normalize_table([], TableKind.PARAMS)
    assert len(rows) == 1
    assert isinstance(rows[0], Record)
    assert rows[0].value == ""
    assert rows[0].is_active is False


def test_empty_body_table_gets_string_sentinel():
    rows = normalize_table([], TableKind.BODY)
    assert isinstance(rows[0], BodyRecord)
    assert rows[0].value == BodyValue.string("")
    assert rows[0].value.type is BodyValueType.STRING


def test_new_sentinel_is_sentinel():
    assert is_sentinel(new_sentinel(TableKind.HEADERS))
    assert is_sentinel(new_sentinel(TableKind.BODY))


# --- Sentinel uniqueness ----------------------------------------------------

def test_interior_empty_rows_are_dropped():
    rows = [
        Record("a", "1"), Record("", ""), Record("b", "2"), Record("", ""),
    ]
    normalize_table(rows, TableKind.PARAMS)
    assert _keys(rows) == ["a", "b", ""]


def test_sentinel_moves_to_end():
    rows = [Record("", ""), Record("a", "1")]
    normalize_table(rows, TableKind.HEADERS)
    assert _keys(rows) == ["a", ""]


def test_last_empty_row_keeps_its_value():
    rows = [Record("", "first"), Record("a", "1"), Record("", "typed")]
    normalize_table(rows, TableKind.PARAMS)
    assert rows[-1].value == "typed"
    assert content_length(rows) == 1


def test_wrong_sentinel_type_is_replaced():
    rows = [BodyRecord("a", BodyValue.number(1)), Record("", "")]
    normalize_table(rows, TableKind.BODY)
    assert isinstance(rows[-1], BodyRecord)
    assert rows[-1].value == BodyValue.string("")


# --- Positions --------------------------------------------------------------

def test_positions_match_indices():
    rows = [Record("a", "1", position=7), Record("b", "2", position=3)]
    normalize_table(rows, TableKind.PARAMS)
    assert [row.position for row in rows] == [0, 1, 2]


def test_normalize_is_in_place():
    rows = [Record("a", "1")]
    result = normalize_table(rows, TableKind.PARAMS)
    assert result is rows


def test_table_is_normalized_detects_violations():
    assert not table_is_normalized([])
    assert not table_is_normalized([Record("a", "1", position=0)])
    assert not table_is_normalized([Record("", "", position=0), Record("", "", position=1)])
    assert not table_is_normalized([Record("a", "1", position=1), Record("", "", position=1)])
    assert table_is_normalized([Record("a", "1", position=0), Record("", "", position=1)])


def test_normalize_is_idempotent():
    rows = normalize_table([Record("", ""), Record("a", "1"), Record("", "")], TableKind.PARAMS)
    snapshot = [(r.key, r.value, r.position) for r in rows]
    normalize_table(rows, TableKind.PARAMS)
    assert [(r.key, r.value, r.position) for r in rows] == snapshot
