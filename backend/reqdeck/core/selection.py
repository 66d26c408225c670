"""Row Selection: which rows of each table the user has picked for copy or drag.

Invariants:
    - Sentinel rows are never reported as selected, even if their index was toggled
    - toggle_all selects every keyed row, or clears them when all were already selected
    - Selected rows are always returned in ascending index order

Design Decisions:
    - Indices, not row objects: the selection belongs to the displayed table and is cleared
      whenever a gesture ends or the displayed request changes
"""

from dataclasses import dataclass, field

from reqdeck.core.domain_types import TableKind
from reqdeck.core.request_models import Row
from reqdeck.core.table_invariants import is_sentinel


@dataclass
class TableSelection:
    """Selected row indices of one table."""

    indices: set[int] = field(default_factory=set)

    @property
    def size(self) -> int:
        return len(self.indices)

    def toggle(self, index: int) -> None:
        if index in self.indices:
            self.indices.discard(index)
        else:
            self.indices.add(index)

    def toggle_all(self, rows: list[Row]) -> None:
        selectable = [i for i, row in enumerate(rows) if not is_sentinel(row)]
        if any(i not in self.indices for i in selectable):
            self.indices.update(selectable)
        else:
            self.indices.difference_update(selectable)

    def clear(self) -> None:
        self.indices.clear()

    def is_selected(self, index: int) -> bool:
        return index in self.indices

    def selected_indices(self, rows: list[Row]) -> list[int]:
        return [
            i for i in sorted(self.indices)
            if 0 <= i < len(rows) and not is_sentinel(rows[i])
        ]

    def selected_rows(self, rows: list[Row]) -> list[Row]:
        return [rows[i] for i in self.selected_indices(rows)]


@dataclass
class SelectionSet:
    """One TableSelection per table of the displayed request."""

    tables: dict[TableKind, TableSelection] = field(
        default_factory=lambda: {kind: TableSelection() for kind in TableKind},
    )

    def of(self, kind: TableKind) -> TableSelection:
        return self.tables[kind]

    def clear(self) -> None:
        for selection in self.tables.values():
            selection.clear()
