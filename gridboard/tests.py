import json

from django.test import SimpleTestCase, override_settings
from django.urls import reverse

from .errors import InvalidArgument, InvalidState, NotFound
from .grid import DragSession, GridItem, GridModel, InteractionState, ResizeSession
from .layout import clamp_column_span, column_class, span_for_width
from .reorder import ReorderController
from .resize import ResizeController


def _grid(*ids, columns=4):
    return GridModel(GridItem(id=item_id, column_span=columns) for item_id in ids)


class LayoutTests(SimpleTestCase):
    def test_clamp_rounds_half_up(self):
        self.assertEqual(clamp_column_span(6.5), 7)
        self.assertEqual(clamp_column_span(2.5), 3)
        self.assertEqual(clamp_column_span(6.49), 6)

    def test_clamp_keeps_span_within_grid(self):
        self.assertEqual(clamp_column_span(-5), 1)
        self.assertEqual(clamp_column_span(0), 1)
        self.assertEqual(clamp_column_span(999), 12)
        self.assertEqual(clamp_column_span(float("inf")), 12)
        self.assertEqual(clamp_column_span(float("-inf")), 1)

    def test_clamp_rejects_values_that_are_not_numbers(self):
        with self.assertRaises(InvalidArgument):
            clamp_column_span(float("nan"))
        with self.assertRaises(InvalidArgument):
            clamp_column_span("wide")

    def test_span_for_width_quantizes_against_container(self):
        self.assertEqual(span_for_width(600, 1200), 6)
        self.assertEqual(span_for_width(640, 1200), 6)
        self.assertEqual(span_for_width(660, 1200), 7)
        self.assertEqual(span_for_width(-300, 1200), 1)

    def test_span_for_width_requires_positive_container(self):
        with self.assertRaises(InvalidArgument):
            span_for_width(400, 0)
        with self.assertRaises(InvalidArgument):
            span_for_width(400, -1200)

    def test_column_class_marks_dragging_items(self):
        self.assertEqual(column_class(4), "col-4 mb-3 resizable-item")
        self.assertEqual(column_class(6, dragging=True), "col-6 mb-3 resizable-item dragging")


class GridModelTests(SimpleTestCase):
    def test_find_by_id_returns_item_and_current_index(self):
        grid = _grid("A", "B", "C")
        item, index = grid.find_by_id("B")
        self.assertEqual(item.id, "B")
        self.assertEqual(index, 1)

        grid.move_item("B", 2)
        _, index = grid.find_by_id("B")
        self.assertEqual(index, 2)

    def test_find_by_id_raises_for_unknown_item(self):
        grid = _grid("A")
        with self.assertRaises(NotFound) as ctx:
            grid.find_by_id("Z")
        self.assertEqual(ctx.exception.item_id, "Z")

    def test_move_item_relocates_single_item(self):
        grid = _grid("A", "B", "C", "D")
        self.assertTrue(grid.move_item("A", 2))
        self.assertEqual(grid.ids(), ["B", "C", "A", "D"])
        self.assertTrue(grid.move_item("D", 0))
        self.assertEqual(grid.ids(), ["D", "B", "C", "A"])

    def test_move_item_clamps_target_index(self):
        grid = _grid("A", "B", "C")
        grid.move_item("A", 10)
        self.assertEqual(grid.ids(), ["B", "C", "A"])
        grid.move_item("A", -4)
        self.assertEqual(grid.ids(), ["A", "B", "C"])

    def test_move_item_to_current_index_is_noop(self):
        grid = _grid("A", "B", "C")
        self.assertFalse(grid.move_item("B", 1))
        self.assertEqual(grid.ids(), ["A", "B", "C"])

    def test_move_item_preserves_ids_for_every_target(self):
        for target in range(-2, 6):
            grid = _grid("A", "B", "C", "D")
            grid.move_item("C", target)
            self.assertEqual(len(grid), 4)
            self.assertEqual(sorted(grid.ids()), ["A", "B", "C", "D"])

    def test_set_column_span_clamps_and_reports_change(self):
        grid = _grid("A")
        self.assertTrue(grid.set_column_span("A", 999))
        self.assertEqual(grid.find_by_id("A")[0].column_span, 12)
        self.assertTrue(grid.set_column_span("A", -5))
        self.assertEqual(grid.find_by_id("A")[0].column_span, 1)
        self.assertTrue(grid.set_column_span("A", 6.5))
        self.assertEqual(grid.find_by_id("A")[0].column_span, 7)
        self.assertFalse(grid.set_column_span("A", 7.2))

    def test_set_column_span_leaves_order_alone(self):
        grid = _grid("A", "B", "C")
        grid.set_column_span("B", 9)
        self.assertEqual(grid.ids(), ["A", "B", "C"])

    def test_constructor_clamps_spans_and_rejects_duplicates(self):
        grid = GridModel([GridItem(id="A", column_span=20), GridItem(id="B", column_span=0)])
        self.assertEqual([item.column_span for item in grid], [12, 1])
        with self.assertRaises(InvalidArgument):
            GridModel([GridItem(id="A"), GridItem(id="A")])

    def test_idle_state_clears_session(self):
        grid = _grid("A")
        grid.set_interaction_state("A", InteractionState.DRAGGING, DragSession(original_index=0))
        grid.set_interaction_state("A", InteractionState.IDLE, DragSession(original_index=0))
        item, _ = grid.find_by_id("A")
        self.assertTrue(item.is_idle)
        self.assertIsNone(item.session)

    def test_add_and_remove_items(self):
        grid = _grid("A", "B")
        grid.add_item(GridItem(id="C", column_span=3), index=0)
        self.assertEqual(grid.ids(), ["C", "A", "B"])
        removed = grid.remove_item("A")
        self.assertEqual(removed.id, "A")
        self.assertEqual(grid.ids(), ["C", "B"])

    def test_remove_item_refuses_busy_item(self):
        grid = _grid("A", "B")
        ReorderController(grid).on_drag_start("A")
        with self.assertRaises(InvalidState):
            grid.remove_item("A")

    def test_items_snapshot_is_detached_from_order(self):
        grid = _grid("A", "B")
        snapshot = grid.items
        grid.move_item("A", 1)
        self.assertEqual([item.id for item in snapshot], ["A", "B"])

    def test_plain_data_keeps_open_sessions(self):
        grid = _grid("A", "B", "C")
        ReorderController(grid).on_drag_start("B")
        ResizeController(grid).on_resize_start("C", 10, 400, 1200)

        restored = GridModel.from_data(json.loads(json.dumps(grid.to_data())))

        self.assertEqual(restored.ids(), ["A", "B", "C"])
        dragged, _ = restored.find_by_id("B")
        self.assertEqual(dragged.interaction_state, InteractionState.DRAGGING)
        self.assertEqual(dragged.session, DragSession(original_index=1))
        resized, _ = restored.find_by_id("C")
        self.assertEqual(resized.session, ResizeSession(10.0, 400.0, 1200.0))


class ReorderControllerTests(SimpleTestCase):
    def setUp(self):
        super().setUp()
        self.grid = _grid("A", "B", "C")
        self.controller = ReorderController(self.grid)

    def test_abandoned_drag_restores_original_order(self):
        self.controller.on_drag_start("A")
        self.controller.on_hover("A", "B")
        self.assertEqual(self.grid.ids(), ["B", "A", "C"])

        restored = self.controller.on_drag_end("A", committed=False)

        self.assertTrue(restored)
        self.assertEqual(self.grid.ids(), ["A", "B", "C"])
        item, _ = self.grid.find_by_id("A")
        self.assertEqual(item.interaction_state, InteractionState.IDLE)
        self.assertIsNone(item.session)

    def test_committed_drag_keeps_new_order(self):
        self.controller.on_drag_start("A")
        self.controller.on_hover("A", "C")
        self.assertFalse(self.controller.on_drag_end("A", committed=True))
        self.assertEqual(self.grid.ids(), ["B", "C", "A"])

    def test_each_hover_uses_positions_left_by_previous_hover(self):
        self.controller.on_drag_start("A")
        self.controller.on_hover("A", "C")
        self.assertEqual(self.grid.ids(), ["B", "C", "A"])

        # B now sits at index 0, so the dragged item lands in front of it.
        # Resolving B against the pre-drag order would give [B, A, C] instead.
        self.controller.on_hover("A", "B")
        self.assertEqual(self.grid.ids(), ["A", "B", "C"])

        self.controller.on_hover("A", "C")
        self.assertEqual(self.grid.ids(), ["B", "C", "A"])

    def test_hover_over_resizing_item_is_ignored(self):
        ResizeController(self.grid).on_resize_start("B", 0, 400, 1200)
        self.controller.on_drag_start("A")

        self.assertFalse(self.controller.on_hover("A", "B"))
        self.assertEqual(self.grid.ids(), ["A", "B", "C"])

        self.assertTrue(self.controller.on_hover("A", "C"))
        self.assertEqual(self.grid.ids(), ["B", "C", "A"])

    def test_repeated_drag_start_keeps_first_rollback_point(self):
        self.controller.on_drag_start("A")
        self.controller.on_hover("A", "C")
        self.controller.on_drag_start("A")

        self.assertTrue(self.controller.on_drag_end("A", committed=False))
        self.assertEqual(self.grid.ids(), ["A", "B", "C"])

    def test_abandoned_drag_without_start_index_keeps_order(self):
        self.grid.set_interaction_state("A", InteractionState.DRAGGING)
        self.grid.move_item("A", 2)

        with self.assertLogs("gridboard.reorder", level="WARNING"):
            restored = self.controller.on_drag_end("A", committed=False)

        self.assertFalse(restored)
        self.assertEqual(self.grid.ids(), ["B", "C", "A"])
        self.assertTrue(self.grid.find_by_id("A")[0].is_idle)

    def test_hovering_over_itself_never_moves(self):
        self.controller.on_drag_start("A")
        self.assertFalse(self.controller.on_hover("A", "A"))
        self.assertEqual(self.grid.ids(), ["A", "B", "C"])

    def test_hover_without_open_drag_is_ignored(self):
        self.assertFalse(self.controller.on_hover("A", "C"))
        self.assertEqual(self.grid.ids(), ["A", "B", "C"])

        self.controller.on_drag_start("A")
        self.controller.on_drag_end("A", committed=True)
        self.assertFalse(self.controller.on_hover("A", "C"))
        self.assertEqual(self.grid.ids(), ["A", "B", "C"])

    def test_hover_over_unknown_target_raises_not_found(self):
        self.controller.on_drag_start("A")
        with self.assertRaises(NotFound):
            self.controller.on_hover("A", "Z")

    def test_drag_start_rejected_while_resizing(self):
        ResizeController(self.grid).on_resize_start("B", 0, 400, 1200)
        with self.assertRaises(InvalidState):
            self.controller.on_drag_start("B")
        item, _ = self.grid.find_by_id("B")
        self.assertEqual(item.interaction_state, InteractionState.RESIZING)

    def test_drag_end_does_not_clobber_resize(self):
        ResizeController(self.grid).on_resize_start("B", 0, 400, 1200)
        self.assertFalse(self.controller.on_drag_end("B", committed=False))
        item, _ = self.grid.find_by_id("B")
        self.assertEqual(item.interaction_state, InteractionState.RESIZING)

    def test_dragging_one_item_leaves_others_idle(self):
        self.controller.on_drag_start("C")
        states = [item.interaction_state for item in self.grid]
        self.assertEqual(
            states,
            [InteractionState.IDLE, InteractionState.IDLE, InteractionState.DRAGGING],
        )


class ResizeControllerTests(SimpleTestCase):
    def setUp(self):
        super().setUp()
        self.grid = _grid("A", "B")
        self.controller = ResizeController(self.grid)

    def test_pointer_delta_snaps_to_columns(self):
        self.controller.on_resize_start("A", 100, 400, 1200)
        self.assertEqual(self.controller.on_resize_move("A", 300), 6)
        self.assertEqual(self.grid.find_by_id("A")[0].column_span, 6)

    def test_samples_reuse_start_measurements(self):
        self.controller.on_resize_start("A", 100, 400, 1200)
        self.controller.on_resize_move("A", 300)
        # Measured from the gesture start, not from the previous sample.
        self.assertEqual(self.controller.on_resize_move("A", 200), 5)
        self.assertEqual(self.controller.on_resize_move("A", 200), 5)

    def test_span_is_clamped_at_both_ends(self):
        self.controller.on_resize_start("A", 100, 400, 1200)
        self.assertEqual(self.controller.on_resize_move("A", -5000), 1)
        self.assertEqual(self.controller.on_resize_move("A", 5000), 12)

    def test_resize_end_keeps_last_span(self):
        self.controller.on_resize_start("A", 100, 400, 1200)
        self.controller.on_resize_move("A", 500)
        self.assertTrue(self.controller.on_resize_end("A"))
        item, _ = self.grid.find_by_id("A")
        self.assertEqual(item.column_span, 8)
        self.assertEqual(item.interaction_state, InteractionState.IDLE)
        self.assertIsNone(item.session)

    def test_resize_start_rejected_while_dragging(self):
        ReorderController(self.grid).on_drag_start("A")
        with self.assertRaises(InvalidState):
            self.controller.on_resize_start("A", 100, 400, 1200)
        item, _ = self.grid.find_by_id("A")
        self.assertEqual(item.interaction_state, InteractionState.DRAGGING)

    def test_non_positive_container_width_is_rejected(self):
        with self.assertRaises(InvalidArgument):
            self.controller.on_resize_start("A", 100, 400, 0)
        item, _ = self.grid.find_by_id("A")
        self.assertTrue(item.is_idle)

    def test_moves_outside_a_resize_session_are_ignored(self):
        self.assertIsNone(self.controller.on_resize_move("A", 900))
        self.assertEqual(self.grid.find_by_id("A")[0].column_span, 4)
        self.assertFalse(self.controller.on_resize_end("A"))

    def test_resizing_does_not_change_order(self):
        self.controller.on_resize_start("B", 0, 400, 1200)
        self.controller.on_resize_move("B", 800)
        self.assertEqual(self.grid.ids(), ["A", "B"])


class GridEventViewTests(SimpleTestCase):
    def _post_event(self, **payload):
        return self.client.post(
            reverse("gridboard:grid-event"),
            data=json.dumps(payload),
            content_type="application/json",
        )

    def _ids(self, response):
        return [item["id"] for item in response.json()["items"]]

    def test_initial_grid_payload(self):
        response = self.client.get(reverse("gridboard:grid-state"))
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["grid_columns"], 12)
        self.assertEqual(self._ids(response), ["1", "2", "3"])
        first = payload["items"][0]
        self.assertEqual(first["columns"], 4)
        self.assertEqual(first["interaction_state"], "idle")
        self.assertEqual(first["css_class"], "col-4 mb-3 resizable-item")
        self.assertTrue(first["style"]["width"].startswith("33.33"))
        self.assertTrue(first["can_drag"])
        self.assertTrue(first["can_resize"])

    @override_settings(GRIDBOARD_INITIAL_ITEMS=[{"id": "x", "columns": 12}, {"id": "y"}])
    def test_initial_items_come_from_settings(self):
        response = self.client.get(reverse("gridboard:grid-state"))
        items = response.json()["items"]
        self.assertEqual([item["id"] for item in items], ["x", "y"])
        self.assertEqual([item["columns"] for item in items], [12, 4])

    def test_drag_session_spans_requests(self):
        response = self._post_event(event="drag_start", item=1)
        self.assertEqual(response.status_code, 200)
        first = response.json()["items"][0]
        self.assertEqual(first["interaction_state"], "dragging")
        self.assertFalse(first["can_resize"])
        self.assertIn("dragging", first["css_class"])

        response = self._post_event(event="hover", item="1", over="3")
        self.assertEqual(self._ids(response), ["2", "3", "1"])

        response = self._post_event(event="drag_end", item="1", committed=False)
        self.assertEqual(self._ids(response), ["1", "2", "3"])
        self.assertEqual(response.json()["items"][0]["interaction_state"], "idle")

    def test_resize_session_spans_requests(self):
        self._post_event(
            event="resize_start", item="1", pointer_x=100, item_width=400, container_width=1200
        )
        response = self._post_event(event="resize_move", item="1", pointer_x=300)
        first = response.json()["items"][0]
        self.assertEqual(first["columns"], 6)
        self.assertEqual(first["interaction_state"], "resizing")
        self.assertFalse(first["can_drag"])

        response = self._post_event(event="resize_end", item="1")
        first = response.json()["items"][0]
        self.assertEqual(first["columns"], 6)
        self.assertEqual(first["interaction_state"], "idle")

    def test_conflicting_session_is_rejected(self):
        self._post_event(
            event="resize_start", item="2", pointer_x=0, item_width=400, container_width=1200
        )
        with self.assertLogs("gridboard.views", level="WARNING"):
            response = self._post_event(event="drag_start", item="2")
        self.assertEqual(response.status_code, 409)
        self.assertIn("error", response.json())

    def test_unknown_item_is_ignored(self):
        with self.assertLogs("gridboard.views", level="INFO"):
            response = self._post_event(event="drag_start", item="99")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["ignored"])
        self.assertEqual(self._ids(response), ["1", "2", "3"])

    def test_invalid_payloads_are_rejected(self):
        response = self.client.post(
            reverse("gridboard:grid-event"), data="{not json", content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)

        response = self._post_event(event="teleport", item="1")
        self.assertEqual(response.status_code, 400)

        response = self._post_event(event="resize_move", item="1")
        self.assertEqual(response.status_code, 400)
        self.assertIn("pointer_x", response.json()["error"])

    def test_drag_end_must_say_whether_it_was_committed(self):
        self._post_event(event="drag_start", item="1")
        self._post_event(event="hover", item="1", over="3")

        response = self._post_event(event="drag_end", item="1")
        self.assertEqual(response.status_code, 400)
        self.assertIn("committed", response.json()["error"])

        response = self.client.get(reverse("gridboard:grid-state"))
        self.assertEqual(self._ids(response), ["2", "3", "1"])
        self.assertEqual(response.json()["items"][2]["interaction_state"], "dragging")

    def test_non_positive_container_width_is_bad_request(self):
        response = self._post_event(
            event="resize_start", item="1", pointer_x=0, item_width=400, container_width=0
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("Container width", response.json()["error"])

    def test_reset_restores_initial_grid(self):
        self._post_event(event="drag_start", item="1")
        self._post_event(event="hover", item="1", over="3")
        response = self.client.post(reverse("gridboard:grid-reset"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self._ids(response), ["1", "2", "3"])
        response = self.client.get(reverse("gridboard:grid-state"))
        self.assertEqual(response.json()["items"][0]["interaction_state"], "idle")
