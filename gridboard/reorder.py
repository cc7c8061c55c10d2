from __future__ import annotations

import logging

from .errors import InvalidState
from .grid import DragSession, GridModel, InteractionState

logger = logging.getLogger(__name__)


class ReorderController:
    """Turns drag-hover events into live reordering of a :class:`GridModel`.

    Each hover commits a move straight away, so the order always tracks the
    item currently under the pointer. Abandoned drags are rolled back to the
    index recorded when the drag started.
    """

    def __init__(self, grid: GridModel) -> None:
        self.grid = grid

    def on_drag_start(self, item_id) -> None:
        item, index = self.grid.find_by_id(item_id)
        if item.interaction_state == InteractionState.RESIZING:
            raise InvalidState(f"Grid item {item_id!r} is being resized and cannot be dragged.")
        if item.interaction_state == InteractionState.DRAGGING and isinstance(
            item.session, DragSession
        ):
            # The rollback point stays where the open drag began.
            logger.info("Drag already open for grid item %r", item_id)
            return
        self.grid.set_interaction_state(
            item_id, InteractionState.DRAGGING, DragSession(original_index=index)
        )
        logger.debug("Drag started for grid item %r at index %d", item_id, index)

    def on_hover(self, dragged_id, over_id) -> bool:
        if dragged_id == over_id:
            return False
        dragged, _ = self.grid.find_by_id(dragged_id)
        if dragged.interaction_state != InteractionState.DRAGGING:
            return False
        over, over_index = self.grid.find_by_id(over_id)
        if over.interaction_state == InteractionState.RESIZING:
            return False
        return self.grid.move_item(dragged_id, over_index)

    def on_drag_end(self, item_id, committed: bool) -> bool:
        """Close the drag session; returns ``True`` if the order was restored."""

        item, _ = self.grid.find_by_id(item_id)
        if item.interaction_state != InteractionState.DRAGGING:
            logger.info("Ignoring drag end for grid item %r with no open drag", item_id)
            return False
        restored = False
        if not committed:
            if isinstance(item.session, DragSession):
                restored = self.grid.move_item(item_id, item.session.original_index)
            else:
                logger.warning(
                    "Grid item %r was dragging without a recorded start index; order kept",
                    item_id,
                )
        self.grid.set_interaction_state(item_id, InteractionState.IDLE)
        logger.debug(
            "Drag ended for grid item %r (committed=%s, restored=%s)",
            item_id,
            committed,
            restored,
        )
        return restored
