"""API payload schemas: titles, indices, enums and clipboard rows."""

import pytest
from pydantic import ValidationError

from reqdeck.core.clipboard import TableRowData
from reqdeck.core.domain_types import HttpMethod, ResponseStatus, RowField, TableKind
from reqdeck.schemas.clipboard import TableRowIn, TableRowsCopy
from reqdeck.schemas.gestures import DragStart, RequestDrop
from reqdeck.schemas.tables import CellEdit, RowCreate
from reqdeck.schemas.workspace import (
    CollectionCreate, MoveItem, RequestCreate, ResponseCreate, TitleUpdate,
)


def test_title_is_stripped():
    assert TitleUpdate(title="  Users  ").title == "Users"


def test_blank_title_rejected():
    with pytest.raises(ValidationError):
        TitleUpdate(title="   ")


def test_title_length_limit():
    with pytest.raises(ValidationError):
        TitleUpdate(title="x" * 201)


def test_creation_defaults():
    assert CollectionCreate().title is None
    request = RequestCreate()
    assert (request.title, request.method) == (None, HttpMethod.GET)
    assert ResponseCreate(data="{}").status is ResponseStatus.SUCCESS
    assert RowCreate() == RowCreate(key="", value="")


def test_negative_indices_rejected():
    with pytest.raises(ValidationError):
        MoveItem(from_index=-1, to_index=0)
    with pytest.raises(ValidationError):
        DragStart(kind="params", index=-2)


def test_enums_parse_from_wire_values():
    edit = CellEdit(index=0, field="key", text="x")
    assert edit.field is RowField.KEY
    assert RequestDrop(kind="body").kind is TableKind.BODY
    assert RequestDrop().kind is None
    with pytest.raises(ValidationError):
        RequestCreate(method="PATCH")


def test_table_rows_to_domain():
    copy = TableRowsCopy(rows=[{"row_index": 0, "columns": ["a", 1, None, True]}])
    assert copy.source == "table"
    assert copy.rows[0].to_domain() == TableRowData(0, ["a", 1, None, True])


def test_table_row_cells_must_be_scalar():
    with pytest.raises(ValidationError):
        TableRowIn(row_index=0, columns=[{"nested": 1}])
