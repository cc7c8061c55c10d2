from django.urls import path

from . import views

app_name = "gridboard"

urlpatterns = [
    path("api/grid/", views.grid_state, name="grid-state"),
    path("api/grid/events/", views.grid_event, name="grid-event"),
    path("api/grid/reset/", views.reset_grid, name="grid-reset"),
]
