"""Table Handlers: row CRUD, cell edits, raw JSON and selection through the session.

Invariants:
    - Each mutation saves once; rejected edits save nothing and notify a warning
    - Deleting or rebuilding a table clears that table's selection
    - Selection commands act on the displayed request
"""

import json

import pytest

from reqdeck.core.domain_types import RowField, TableKind
from reqdeck.core.errors import (
    EmptyKeyError, MalformedRawTableError, NoActiveRequestError, RowIndexError,
)
from reqdeck.core.request_models import BodyValue
from reqdeck.services.handle_tables import TableHandlers


async def test_create_and_delete_row(session, persistence, seeded):
    handlers = TableHandlers(session)
    request_id = seeded["second"].id
    row = await handlers.create_row(request_id, TableKind.PARAMS, "x", "1")
    assert row.position == 0
    session.selection.of(TableKind.PARAMS).toggle(0)
    removed = await handlers.delete_row(request_id, TableKind.PARAMS, 0)
    assert removed.key == "x"
    assert [r.key for r in seeded["second"].params] == [""]
    assert session.selection.of(TableKind.PARAMS).size == 0
    assert persistence.saves == 3


async def test_delete_out_of_range_saves_nothing(session, persistence, seeded):
    handlers = TableHandlers(session)
    saves = persistence.saves
    assert await handlers.delete_row(seeded["first"].id, TableKind.PARAMS, 40) is None
    assert persistence.saves == saves


async def test_edit_cell_and_undo(session, seeded):
    handlers = TableHandlers(session)
    first = seeded["first"]
    await handlers.edit_cell(first.id, TableKind.BODY, 0, RowField.VALUE, "[1, 2]")
    assert first.body[0].value == BodyValue.array([1, 2])
    await session.undo()
    assert first.body[0].value == BodyValue.number(5)


async def test_edit_cell_rejections_notify(session, notifier, persistence, seeded):
    handlers = TableHandlers(session)
    saves = persistence.saves
    with pytest.raises(EmptyKeyError):
        await handlers.edit_cell(seeded["first"].id, TableKind.PARAMS, 1, RowField.KEY, "")
    with pytest.raises(RowIndexError):
        await handlers.edit_cell(seeded["first"].id, TableKind.PARAMS, 9, RowField.VALUE, "x")
    assert persistence.saves == saves
    assert [n.severity.value for n in notifier.recent()[-2:]] == ["warning", "warning"]


async def test_active_flags(session, seeded):
    handlers = TableHandlers(session)
    first = seeded["first"]
    await handlers.set_row_active(first.id, TableKind.PARAMS, 1, False)
    assert first.params[1].is_active is False
    await handlers.set_all_active(first.id, TableKind.PARAMS, False)
    assert not any(r.is_active for r in first.params)


async def test_raw_json_round_trip(session, seeded):
    handlers = TableHandlers(session)
    first = seeded["first"]
    assert json.loads(handlers.raw_json(first.id, TableKind.PARAMS)) == {"a": "1", "b": "2", "c": "3"}
    rows = await handlers.replace_from_raw(first.id, TableKind.BODY, '{"flag": true, "name": "x"}')
    assert [(r.key, r.value) for r in rows[:-1]] == [
        ("flag", BodyValue.boolean(True)), ("name", BodyValue.string("x")),
    ]


async def test_malformed_raw_json_keeps_table(session, seeded):
    handlers = TableHandlers(session)
    with pytest.raises(MalformedRawTableError):
        await handlers.replace_from_raw(seeded["first"].id, TableKind.PARAMS, "{oops")
    assert [r.key for r in seeded["first"].params] == ["a", "b", "c", ""]


async def test_selection_on_displayed_request(session, seeded):
    handlers = TableHandlers(session)
    handlers.toggle_selected(TableKind.PARAMS, 2)
    assert session.selection.of(TableKind.PARAMS).indices == {2}
    selection = handlers.toggle_select_all(TableKind.PARAMS)
    assert selection.selected_indices(seeded["first"].params) == [0, 1, 2]
    handlers.toggle_select_all(TableKind.PARAMS)
    assert selection.size == 0
    handlers.toggle_selected(TableKind.BODY, 0)
    handlers.clear_selection()
    assert session.selection.of(TableKind.BODY).size == 0


async def test_select_all_needs_displayed_request(session):
    with pytest.raises(NoActiveRequestError):
        TableHandlers(session).toggle_select_all(TableKind.PARAMS)
