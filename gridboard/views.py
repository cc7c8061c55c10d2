from __future__ import annotations

import json
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from .errors import GridError, InvalidArgument, InvalidState, NotFound
from .forms import EVENT_FORMS
from .grid import GridItem, GridModel, InteractionState
from .layout import DEFAULT_COLUMN_SPAN, GRID_COLUMNS, column_class, column_width_percent
from .reorder import ReorderController
from .resize import ResizeController

logger = logging.getLogger(__name__)

SESSION_GRID_KEY = "gridboard_grid"

DEFAULT_INITIAL_ITEMS = [
    {"id": 1, "columns": 4},
    {"id": 2, "columns": 4},
    {"id": 3, "columns": 4},
]


def _initial_grid() -> GridModel:
    specs = getattr(settings, "GRIDBOARD_INITIAL_ITEMS", None) or DEFAULT_INITIAL_ITEMS
    return GridModel.from_specs(
        {"id": str(spec["id"]), "columns": spec.get("columns", DEFAULT_COLUMN_SPAN)} for spec in specs
    )


def _load_grid(request) -> GridModel:
    data = request.session.get(SESSION_GRID_KEY)
    if not data:
        return _initial_grid()
    try:
        return GridModel.from_data(data)
    except (GridError, KeyError, TypeError, ValueError):
        logger.warning("Discarding unreadable grid stored in session %s", request.session.session_key)
        return _initial_grid()


def _store_grid(request, grid: GridModel) -> None:
    request.session[SESSION_GRID_KEY] = grid.to_data()


def _item_payload(item: GridItem) -> dict:
    dragging = item.interaction_state == InteractionState.DRAGGING
    resizing = item.interaction_state == InteractionState.RESIZING
    return {
        "id": item.id,
        "columns": item.column_span,
        "interaction_state": item.interaction_state.value,
        "can_drag": not resizing,
        "can_resize": not dragging,
        "css_class": column_class(item.column_span, dragging=dragging),
        "style": {"width": f"{column_width_percent(item.column_span)}%"},
    }


def _grid_payload(grid: GridModel) -> dict:
    return {
        "items": [_item_payload(item) for item in grid],
        "grid_columns": GRID_COLUMNS,
    }


def _first_form_error(form, default_message: str) -> str:
    if not form.errors:
        return default_message
    for field, errors in form.errors.items():
        if errors:
            if field == "__all__":
                return errors[0]
            return f"{field}: {errors[0]}"
    return default_message


def apply_event(grid: GridModel, event: str, data: dict) -> None:
    """Dispatch one validated event to the controller that owns it."""

    item_id = data["item"]
    if event == "drag_start":
        ReorderController(grid).on_drag_start(item_id)
    elif event == "hover":
        ReorderController(grid).on_hover(item_id, data["over"])
    elif event == "drag_end":
        ReorderController(grid).on_drag_end(item_id, data["committed"])
    elif event == "resize_start":
        ResizeController(grid).on_resize_start(
            item_id,
            data["pointer_x"],
            data["item_width"],
            data["container_width"],
        )
    elif event == "resize_move":
        ResizeController(grid).on_resize_move(item_id, data["pointer_x"])
    elif event == "resize_end":
        ResizeController(grid).on_resize_end(item_id)
    else:
        raise InvalidArgument(f"Unsupported event {event!r}.")


@ensure_csrf_cookie
@require_GET
def grid_state(request):
    grid = _load_grid(request)
    _store_grid(request, grid)
    return JsonResponse(_grid_payload(grid))


@require_POST
def grid_event(request):
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JsonResponse({"error": "Invalid JSON payload."}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({"error": "Event payload must be an object."}, status=400)

    event = str(payload.get("event") or "").lower()
    form_class = EVENT_FORMS.get(event)
    if form_class is None:
        return JsonResponse({"error": "Unsupported event."}, status=400)

    form = form_class(payload)
    if not form.is_valid():
        return JsonResponse(
            {"error": _first_form_error(form, "Invalid event payload.")},
            status=400,
        )

    grid = _load_grid(request)
    ignored = False
    try:
        apply_event(grid, event, form.cleaned_data)
    except NotFound as exc:
        logger.info("Ignoring %s event for unknown grid item %r", event, exc.item_id)
        ignored = True
    except InvalidState as exc:
        logger.warning("Rejected %s event: %s", event, exc)
        return JsonResponse({"error": str(exc), **_grid_payload(grid)}, status=409)
    except InvalidArgument as exc:
        return JsonResponse({"error": str(exc)}, status=400)

    _store_grid(request, grid)
    response = _grid_payload(grid)
    response["ignored"] = ignored
    return JsonResponse(response)


@require_POST
def reset_grid(request):
    grid = _initial_grid()
    _store_grid(request, grid)
    return JsonResponse(_grid_payload(grid))
