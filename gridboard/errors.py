from __future__ import annotations


class GridError(Exception):
    """Base class for failures raised by the grid interaction core."""


class NotFound(GridError, LookupError):
    """No item with the requested id is present in the grid."""

    def __init__(self, item_id) -> None:
        super().__init__(f"No grid item with id {item_id!r}.")
        self.item_id = item_id


class InvalidState(GridError):
    """An operation was attempted while the item is busy with another interaction."""


class InvalidArgument(GridError, ValueError):
    """Malformed geometry or value handed to the core."""
