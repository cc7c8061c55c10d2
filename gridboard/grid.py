"""Ordered, column-sized grid items and the operations that mutate them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Iterator, Mapping, Union

from django.db import models

from .errors import InvalidArgument, InvalidState, NotFound
from .layout import DEFAULT_COLUMN_SPAN, clamp_column_span

logger = logging.getLogger(__name__)


class InteractionState(models.TextChoices):
    IDLE = "idle", "Idle"
    DRAGGING = "dragging", "Dragging"
    RESIZING = "resizing", "Resizing"


@dataclass(frozen=True)
class DragSession:
    """Values captured when a drag starts, kept until it ends."""

    original_index: int


@dataclass(frozen=True)
class ResizeSession:
    """Measurements captured when a resize starts.

    The container and start widths are reused for every pointer sample of the
    gesture; they are never re-measured mid-gesture.
    """

    start_pointer_x: float
    start_width: float
    container_width: float


Session = Union[DragSession, ResizeSession]


@dataclass
class GridItem:
    id: Hashable
    column_span: int = DEFAULT_COLUMN_SPAN
    interaction_state: InteractionState = InteractionState.IDLE
    session: Session | None = None

    @property
    def is_idle(self) -> bool:
        return self.interaction_state == InteractionState.IDLE


class GridModel:
    """Owns the left-to-right sequence of :class:`GridItem` objects.

    Positions shift on every move, so callers address items by id and resolve
    the index again for each use. Every operation is synchronous and leaves
    ids unique and spans within ``[1, 12]``.
    """

    def __init__(self, items: Iterable[GridItem] = ()) -> None:
        self._items: list[GridItem] = []
        for item in items:
            self.add_item(item)

    @classmethod
    def from_specs(cls, specs: Iterable[Mapping[str, Any]]) -> "GridModel":
        """Build a grid from ``{"id": ..., "columns": ...}`` mappings."""

        return cls(
            GridItem(
                id=spec["id"],
                column_span=spec.get("columns", DEFAULT_COLUMN_SPAN),
            )
            for spec in specs
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def items(self) -> tuple[GridItem, ...]:
        return tuple(self._items)

    def ids(self) -> list[Hashable]:
        return [item.id for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[GridItem]:
        return iter(tuple(self._items))

    def __contains__(self, item_id) -> bool:
        return any(item.id == item_id for item in self._items)

    def find_by_id(self, item_id) -> tuple[GridItem, int]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return item, index
        raise NotFound(item_id)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def move_item(self, item_id, target_index: int) -> bool:
        """Relocate one item to ``target_index``, keeping everyone else's order.

        The target is clamped to the valid range. Returns ``True`` when the
        order changed.
        """

        item, index = self.find_by_id(item_id)
        target = max(0, min(int(target_index), len(self._items) - 1))
        if target == index:
            return False
        del self._items[index]
        self._items.insert(target, item)
        logger.debug("Moved grid item %r from %d to %d", item_id, index, target)
        return True

    def set_column_span(self, item_id, value) -> bool:
        item, _ = self.find_by_id(item_id)
        span = clamp_column_span(value)
        if span == item.column_span:
            return False
        logger.debug(
            "Grid item %r spans %d columns (was %d)", item_id, span, item.column_span
        )
        item.column_span = span
        return True

    def set_interaction_state(
        self, item_id, state: InteractionState, session: Session | None = None
    ) -> None:
        item, _ = self.find_by_id(item_id)
        state = InteractionState(state)
        item.interaction_state = state
        item.session = None if state == InteractionState.IDLE else session

    def add_item(self, item: GridItem, index: int | None = None) -> None:
        if item.id in self:
            raise InvalidArgument(f"Duplicate grid item id {item.id!r}.")
        item.column_span = clamp_column_span(item.column_span)
        item.interaction_state = InteractionState(item.interaction_state)
        if index is None:
            self._items.append(item)
        else:
            self._items.insert(max(0, min(int(index), len(self._items))), item)

    def remove_item(self, item_id) -> GridItem:
        item, index = self.find_by_id(item_id)
        if not item.is_idle:
            raise InvalidState(
                f"Grid item {item_id!r} cannot be removed while {item.interaction_state.label.lower()}."
            )
        del self._items[index]
        return item

    # ------------------------------------------------------------------
    # Plain data round trip
    # ------------------------------------------------------------------
    def to_data(self) -> list[dict[str, Any]]:
        data = []
        for item in self._items:
            entry: dict[str, Any] = {
                "id": item.id,
                "columns": item.column_span,
                "state": item.interaction_state.value,
            }
            if isinstance(item.session, DragSession):
                entry["session"] = {"original_index": item.session.original_index}
            elif isinstance(item.session, ResizeSession):
                entry["session"] = {
                    "start_pointer_x": item.session.start_pointer_x,
                    "start_width": item.session.start_width,
                    "container_width": item.session.container_width,
                }
            data.append(entry)
        return data

    @classmethod
    def from_data(cls, data: Iterable[Mapping[str, Any]]) -> "GridModel":
        grid = cls()
        for entry in data:
            state = InteractionState(entry.get("state", InteractionState.IDLE))
            raw_session = entry.get("session") or {}
            session: Session | None = None
            if state == InteractionState.DRAGGING and raw_session:
                session = DragSession(original_index=int(raw_session["original_index"]))
            elif state == InteractionState.RESIZING and raw_session:
                session = ResizeSession(
                    start_pointer_x=float(raw_session["start_pointer_x"]),
                    start_width=float(raw_session["start_width"]),
                    container_width=float(raw_session["container_width"]),
                )
            grid.add_item(
                GridItem(
                    id=entry["id"],
                    column_span=entry.get("columns", DEFAULT_COLUMN_SPAN),
                    interaction_state=state,
                    session=session,
                )
            )
        return grid
