"""Row selection tests.

Tests cover:
    - Toggling single rows
    - Toggle-all over keyed rows (select all, then clear)
    - Sentinel and stale indices never reported
"""

from reqdeck.core.domain_types import TableKind
from reqdeck.core.request_models import Record
from reqdeck.core.selection import SelectionSet, TableSelection
from reqdeck.core.table_invariants import normalize_table


def _rows():
    return normalize_table([Record("a", "1"), Record("b", "2"), Record("c", "3")], TableKind.PARAMS)


def test_toggle_adds_and_removes():
    selection = TableSelection()
    selection.toggle(1)
    assert selection.is_selected(1)
    selection.toggle(1)
    assert not selection.is_selected(1)


def test_toggle_all_selects_every_keyed_row():
    rows = _rows()
    selection = TableSelection()
    selection.toggle_all(rows)
    assert selection.selected_indices(rows) == [0, 1, 2]
    assert 3 not in selection.indices


def test_toggle_all_twice_clears():
    rows = _rows()
    selection = TableSelection()
    selection.toggle_all(rows)
    selection.toggle_all(rows)
    assert selection.size == 0


def test_toggle_all_completes_partial_selection():
    rows = _rows()
    selection = TableSelection({1})
    selection.toggle_all(rows)
    assert selection.selected_indices(rows) == [0, 1, 2]


def test_sentinel_and_stale_indices_ignored():
    rows = _rows()
    selection = TableSelection({3, 2, 99, 0})
    assert selection.selected_indices(rows) == [0, 2]
    assert [r.key for r in selection.selected_rows(rows)] == ["a", "c"]


def test_selection_set_has_one_selection_per_table():
    selections = SelectionSet()
    selections.of(TableKind.BODY).toggle(0)
    assert selections.of(TableKind.PARAMS).size == 0
    selections.clear()
    assert selections.of(TableKind.BODY).size == 0
