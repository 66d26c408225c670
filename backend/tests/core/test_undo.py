"""Undo stack tests.

Tests cover:
    - LIFO order, one entry per pop, empty pop
    - Entry constructors carry addressing
    - table_kind mapping for field entries
"""

from reqdeck.core.domain_types import RowField, TableKind
from reqdeck.core.undo import UndoEntry, UndoKind, UndoStack


def test_pop_is_lifo():
    stack = UndoStack()
    first = UndoEntry.url_change("r1", "a", "b")
    second = UndoEntry.request_title_change("r1", "x", "y")
    stack.push(first)
    stack.push(second)
    assert stack.pop() is second
    assert stack.pop() is first
    assert stack.pop() is None


def test_peek_and_depth():
    stack = UndoStack()
    assert stack.peek() is None
    stack.push(UndoEntry.collection_title_change("c1", "old", "new"))
    assert stack.depth == 1
    assert len(stack) == 1
    assert stack.peek().kind is UndoKind.COLLECTION_TITLE
    stack.clear()
    assert stack.depth == 0


def test_field_change_addressing():
    entry = UndoEntry.field_change(TableKind.HEADERS, "r1", 2, RowField.VALUE, "old", "new")
    assert entry.kind is UndoKind.HEADER
    assert entry.table_kind is TableKind.HEADERS
    assert (entry.request_id, entry.index, entry.field) == ("r1", 2, RowField.VALUE)


def test_title_entries_have_no_table():
    assert UndoEntry.url_change("r1", "a", "b").table_kind is None
