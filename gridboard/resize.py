from __future__ import annotations

import logging

from .errors import InvalidArgument, InvalidState
from .grid import GridModel, InteractionState, ResizeSession
from .layout import measurement, span_for_width

logger = logging.getLogger(__name__)


class ResizeController:
    """Snaps a resize-handle gesture to whole grid columns.

    The start pointer position, start width and container width are captured
    once in :meth:`on_resize_start`; every move sample is quantized against
    them. Ending the gesture keeps whatever span was last computed.
    """

    def __init__(self, grid: GridModel) -> None:
        self.grid = grid

    def on_resize_start(
        self,
        item_id,
        pointer_x: float,
        item_pixel_width: float,
        container_pixel_width: float,
    ) -> None:
        item, _ = self.grid.find_by_id(item_id)
        container_width = measurement(container_pixel_width, "Container width")
        if container_width <= 0:
            raise InvalidArgument(
                f"Container width must be positive, got {container_pixel_width!r}."
            )
        session = ResizeSession(
            start_pointer_x=measurement(pointer_x, "Pointer position"),
            start_width=measurement(item_pixel_width, "Item width"),
            container_width=container_width,
        )
        if item.interaction_state == InteractionState.DRAGGING:
            raise InvalidState(f"Grid item {item_id!r} is being dragged and cannot be resized.")
        self.grid.set_interaction_state(item_id, InteractionState.RESIZING, session)
        logger.debug(
            "Resize started for grid item %r at x=%s (width %s of %s)",
            item_id,
            pointer_x,
            item_pixel_width,
            container_pixel_width,
        )

    def on_resize_move(self, item_id, pointer_x: float) -> int | None:
        """Apply one pointer sample; returns the resulting span."""

        item, _ = self.grid.find_by_id(item_id)
        session = item.session
        if item.interaction_state != InteractionState.RESIZING or not isinstance(
            session, ResizeSession
        ):
            return None
        delta = measurement(pointer_x, "Pointer position") - session.start_pointer_x
        new_span = span_for_width(session.start_width + delta, session.container_width)
        self.grid.set_column_span(item_id, new_span)
        return item.column_span

    def on_resize_end(self, item_id) -> bool:
        item, _ = self.grid.find_by_id(item_id)
        if item.interaction_state != InteractionState.RESIZING:
            logger.info("Ignoring resize end for grid item %r with no open resize", item_id)
            return False
        self.grid.set_interaction_state(item_id, InteractionState.IDLE)
        logger.debug("Resize ended for grid item %r at %d columns", item_id, item.column_span)
        return True
