"""Drag Gesture: Idle -> Dragging -> (Dropped | Cancelled) -> Idle for one row drag.

Invariants:
    - The payload is a deep copy taken at start; later table edits never alias it
    - Sentinel rows never start a gesture
    - A gesture carries the whole selection only when >= 2 keyed rows are selected
    - end() does not clear anything: payload and hover targets live until cleanup()
    - cleanup() of a gesture that was never dropped records CANCELLED, then returns to IDLE

Design Decisions:
    - Drop handling may run after end() (pointer release is reported before the drop),
      so cleanup is a separate step the shell defers on the DeferredQueue
    - Hover targets live on the gesture, not the session: they mean nothing outside a drag
"""

import copy
from dataclasses import dataclass, field
from enum import Enum

from reqdeck.core.domain_types import TableKind
from reqdeck.core.request_models import Row
from reqdeck.core.table_invariants import is_sentinel


class GesturePhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


@dataclass
class DragSource:
    """Where the dragged rows came from."""
    table_kind: TableKind
    request_id: str | None
    index: int
    indices: list[int] = field(default_factory=list)


@dataclass
class DragPayload:
    """Snapshot of the dragged rows plus their source address."""
    items: list[Row]
    source: DragSource

    @property
    def is_multi(self) -> bool:
        return len(self.items) > 1


@dataclass
class DragGesture:
    """State of the current (or most recent) row drag."""

    phase: GesturePhase = GesturePhase.IDLE
    payload: DragPayload | None = None
    ending: bool = False
    last_outcome: GesturePhase | None = None
    generation: int = 0  # bumped per start; stale cleanups compare against it

    # Hover targets (stale until cleanup, by contract)
    hovered_collection_id: str | None = None
    hovered_request_id: str | None = None
    target_request_id: str | None = None
    target_tab: TableKind | None = None

    @property
    def is_dragging(self) -> bool:
        return self.phase is GesturePhase.DRAGGING

    @property
    def accepts_drop(self) -> bool:
        return self.phase is GesturePhase.DRAGGING and self.payload is not None

    def start(
        self,
        rows: list[Row],
        index: int,
        selected_indices: list[int],
        kind: TableKind,
        request_id: str | None,
    ) -> DragPayload | None:
        """Snapshot the dragged rows. Returns None when the row can't be dragged."""
        if not 0 <= index < len(rows) or is_sentinel(rows[index]):
            return None

        selected = [i for i in selected_indices if 0 <= i < len(rows) and not is_sentinel(rows[i])]
        if len(selected) > 1:
            indices = sorted(selected)
            items = [copy.deepcopy(rows[i]) for i in indices]
        else:
            indices = [index]
            items = [copy.deepcopy(rows[index])]

        self._reset()
        self.generation += 1
        self.payload = DragPayload(
            items=items,
            source=DragSource(
                table_kind=kind, request_id=request_id, index=index, indices=indices,
            ),
        )
        self.phase = GesturePhase.DRAGGING
        return self.payload

    def mark_dropped(self) -> None:
        self.phase = GesturePhase.DROPPED

    def end(self) -> None:
        """Pointer released: cleanup follows later."""
        self.ending = True

    def cleanup(self, generation: int | None = None) -> GesturePhase | None:
        """Deferred end of gesture. Returns the outcome (DROPPED or CANCELLED).

        A cleanup scheduled for an earlier gesture (generation mismatch) is a no-op.
        """
        if self.phase is GesturePhase.IDLE:
            return None
        if generation is not None and generation != self.generation:
            return None
        outcome = (
            GesturePhase.DROPPED if self.phase is GesturePhase.DROPPED
            else GesturePhase.CANCELLED
        )
        self._reset()
        self.last_outcome = outcome
        return outcome

    def cancel(self) -> None:
        """Abort without a drop: nothing was committed, so nothing to roll back."""
        self._reset()
        self.last_outcome = GesturePhase.CANCELLED

    def _reset(self) -> None:
        self.phase = GesturePhase.IDLE
        self.payload = None
        self.ending = False
        self.hovered_collection_id = None
        self.hovered_request_id = None
        self.target_request_id = None
        self.target_tab = None
