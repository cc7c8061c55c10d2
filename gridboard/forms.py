from django import forms


class GridEventForm(forms.Form):
    item = forms.CharField(max_length=100)


class HoverForm(GridEventForm):
    over = forms.CharField(max_length=100)


class DragEndForm(GridEventForm):
    committed = forms.BooleanField(required=False)

    def clean(self):
        cleaned = super().clean()
        if "committed" not in self.data:
            self.add_error("committed", "State whether the drag was dropped on a target.")
        return cleaned


class ResizeStartForm(GridEventForm):
    pointer_x = forms.FloatField()
    item_width = forms.FloatField(min_value=0)
    container_width = forms.FloatField(
        help_text="Pixel width of the container, representing all twelve columns.",
    )


class ResizeMoveForm(GridEventForm):
    pointer_x = forms.FloatField()


EVENT_FORMS = {
    "drag_start": GridEventForm,
    "hover": HoverForm,
    "drag_end": DragEndForm,
    "resize_start": ResizeStartForm,
    "resize_move": ResizeMoveForm,
    "resize_end": GridEventForm,
}
