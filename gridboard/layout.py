from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP

from .errors import InvalidArgument

GRID_COLUMNS = 12
MIN_COLUMN_SPAN = 1
DEFAULT_COLUMN_SPAN = 4

COLUMN_WIDTH_PERCENT = 100 / GRID_COLUMNS


def _number(value, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be a number, got {value!r}.") from None
    if math.isnan(number):
        raise InvalidArgument(f"{name} must be a number, got NaN.")
    return number


def measurement(value, name: str = "Measurement") -> float:
    """Coerce a pixel measurement handed over by the renderer to a finite float."""

    number = _number(value, name)
    if math.isinf(number):
        raise InvalidArgument(f"{name} must be finite.")
    return number


def clamp_column_span(value) -> int:
    """Round ``value`` half-up to a whole column count within ``[1, GRID_COLUMNS]``.

    ``6.5`` becomes ``7``; ``-5`` becomes ``1`` and ``999`` becomes ``12``.
    Infinities clamp to the nearest bound.
    """

    number = _number(value, "Column span")
    if number >= GRID_COLUMNS:
        return GRID_COLUMNS
    if number <= MIN_COLUMN_SPAN:
        return MIN_COLUMN_SPAN
    rounded = int(Decimal(str(number)).to_integral_value(rounding=ROUND_HALF_UP))
    return max(MIN_COLUMN_SPAN, min(GRID_COLUMNS, rounded))


def span_for_width(width: float, container_width: float) -> int:
    """Quantize a pixel width to the nearest column count of the container."""

    width = measurement(width, "Width")
    container_width = measurement(container_width, "Container width")
    if container_width <= 0:
        raise InvalidArgument(
            f"Container width must be positive, got {container_width!r}."
        )
    return clamp_column_span(width / container_width * GRID_COLUMNS)


def column_width_percent(column_span: int) -> float:
    """Return the width of ``column_span`` columns as a container percentage."""

    return max(column_span, MIN_COLUMN_SPAN) * COLUMN_WIDTH_PERCENT


def column_class(column_span: int, *, dragging: bool = False) -> str:
    """Bootstrap class list used by the renderer for one grid item."""

    classes = [f"col-{column_span}", "mb-3", "resizable-item"]
    if dragging:
        classes.append("dragging")
    return " ".join(classes)
