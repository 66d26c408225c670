"""Reorder engine tests: single moves, selection moves, cross-table moves.

Tests cover:
    - Splice moves clamp both indices
    - Selection moves keep relative order and land contiguously
    - Insert-point correction for removed rows in front of the drop index
    - Cross-table moves clone, coerce and remove the source by content
    - Incompatible drops are rejected before mutation
"""

import pytest

from reqdeck.core.domain_types import TableKind
from reqdeck.core.errors import IncompatibleDropError
from reqdeck.core.reorder import (
    append_rows, check_drop_compatible, move_across, move_in_list, move_item,
    move_selection, remove_matching_rows, selection_insert_index,
)
from reqdeck.core.request_models import BodyRecord, BodyValue, Record
from reqdeck.core.table_invariants import normalize_table, table_is_normalized


def _table(*keys, kind=TableKind.PARAMS):
    return normalize_table([Record(k, f"v{k}", True) for k in keys], kind)


def _keys(rows):
    return [row.key for row in rows]


# --- Plain moves ------------------------------------------------------------

def test_move_in_list_clamps_indices():
    assert move_in_list(["a", "b", "c"], 0, 10) == ["b", "c", "a"]
    assert move_in_list(["a", "b", "c"], 10, -3) == ["c", "a", "b"]


def test_move_in_list_empty_is_noop():
    assert move_in_list([], 0, 1) == []


def test_move_item_onto_sentinel_keeps_sentinel_last():
    rows = _table("A", "B", "C")
    move_item(rows, 0, 3, TableKind.PARAMS)
    assert _keys(rows) == ["B", "C", "A", ""]
    assert table_is_normalized(rows)


def test_move_item_up():
    rows = _table("A", "B", "C")
    move_item(rows, 2, 0, TableKind.PARAMS)
    assert _keys(rows) == ["C", "A", "B", ""]


# --- Selection moves --------------------------------------------------------

def test_selection_insert_index_subtracts_rows_before_drop():
    assert selection_insert_index([0, 2], 3, 3) == 1
    assert selection_insert_index([4], 1, 4) == 1
    assert selection_insert_index([0, 1], 100, 3) == 3


def test_move_selection_forward():
    rows = _table("A", "B", "C", "D", "E")
    moved = move_selection(rows, [0, 2], 3, TableKind.PARAMS)
    assert _keys(moved) == ["A", "C"]
    assert _keys(rows) == ["B", "A", "C", "D", "E", ""]
    assert table_is_normalized(rows)


def test_move_selection_to_end():
    rows = _table("A", "B", "C", "D", "E")
    move_selection(rows, [1, 0], 5, TableKind.PARAMS)
    assert _keys(rows) == ["C", "D", "E", "A", "B", ""]


def test_move_selection_backward_keeps_relative_order():
    rows = _table("A", "B", "C", "D", "E")
    move_selection(rows, [4, 2], 0, TableKind.PARAMS)
    assert _keys(rows) == ["C", "E", "A", "B", "D", ""]


def test_move_selection_empty_is_noop():
    rows = _table("A", "B")
    assert move_selection(rows, [], 1, TableKind.PARAMS) == []
    assert _keys(rows) == ["A", "B", ""]


# --- Cross-table moves ------------------------------------------------------

def test_move_across_params_to_body():
    source = _table("a", "b")
    dest = normalize_table([BodyRecord("x", BodyValue.number(1), True)], TableKind.BODY)
    items = [Record("a", "va", True)]

    inserted = move_across(source, dest, items, 1, TableKind.PARAMS, TableKind.BODY)

    assert _keys(dest) == ["x", "a", ""]
    assert dest[1].value == BodyValue.string("va")
    assert inserted[0] is dest[1]
    assert _keys(source) == ["b", ""]
    assert table_is_normalized(source)
    assert table_is_normalized(dest)


def test_move_across_body_to_headers_flattens():
    source = normalize_table([BodyRecord("n", BodyValue.number(5), True)], TableKind.BODY)
    dest = _table(kind=TableKind.HEADERS)
    move_across(source, dest, [BodyRecord("n", BodyValue.number(5), True)], 0,
                TableKind.BODY, TableKind.HEADERS)
    assert (dest[0].key, dest[0].value) == ("n", "5")
    assert _keys(source) == [""]


def test_move_across_same_list_skips_inserted_clones():
    rows = _table("a", "b")
    original = rows[0]
    move_across(rows, rows, [Record("a", "va", True)], 0, TableKind.PARAMS, TableKind.PARAMS)
    assert _keys(rows) == ["a", "b", ""]
    assert rows[0] is not original


def test_remove_matching_rows_removes_first_match_only():
    rows = [Record("a", "1"), Record("a", "1"), Record("", "")]
    removed = remove_matching_rows(rows, [Record("a", "1")])
    assert removed == [0]
    assert _keys(rows) == ["a", ""]


def test_append_rows_inserts_above_sentinel():
    dest = _table("x")
    inserted = append_rows(dest, [Record("y", "1", True)], TableKind.PARAMS, TableKind.PARAMS)
    assert _keys(dest) == ["x", "y", ""]
    assert inserted[0] is dest[1]


def test_append_rows_skips_sentinels_in_payload():
    dest = _table()
    append_rows(dest, [Record("", "")], TableKind.PARAMS, TableKind.PARAMS)
    assert _keys(dest) == [""]


# --- Compatibility ----------------------------------------------------------

def test_incompatible_drop_rejected_without_coercion():
    with pytest.raises(IncompatibleDropError) as exc:
        check_drop_compatible(TableKind.PARAMS, TableKind.BODY, coercion_supported=False)
    assert exc.value.message == "Cannot drop params item to body tab"


def test_drop_allowed_with_coercion_or_same_family():
    check_drop_compatible(TableKind.BODY, TableKind.PARAMS, coercion_supported=True)
    check_drop_compatible(TableKind.PARAMS, TableKind.HEADERS, coercion_supported=False)
