import logging

from shiny import reactive, render
from shiny.express import input, ui
from shinywidgets import render_plotly

from jobs_dashboard.config import SCENE_OPTIONS
from jobs_dashboard.plotting import build_figure
from jobs_dashboard.render import present
from jobs_dashboard.selection import DragSlider, SelectMonth, SwitchScene, ViewSelector
from jobs_dashboard.session import DashboardSession
from jobs_dashboard.views import DatasetNotReady, Scene

logging.basicConfig(level=logging.INFO)

# Helpers for UI mapping
SCENE_CHOICES = {str(value): label for label, value in SCENE_OPTIONS}

# ======================================================
#  SESSION STATE
# ======================================================
# Express re-runs this file per browser session, so each user gets their
# own tables and selection state.
dashboard = DashboardSession()
selector = ViewSelector(dashboard)
MONTH_CHOICES = dict(dashboard.month_options())

current_view = reactive.Value(DatasetNotReady(scene=Scene.POSTINGS))


@reactive.effect
async def _load_dataset():
    # Runs once: the effect reads no reactive inputs.
    await dashboard.load_source()
    current_view.set(selector.refresh())


@reactive.effect
@reactive.event(input.scene, ignore_init=True)
def _switch_scene():
    current_view.set(selector.dispatch(SwitchScene(int(input.scene()))))


@reactive.effect
@reactive.event(input.month)
def _select_month():
    view = selector.dispatch(SelectMonth(input.month()))
    if view is not None:
        current_view.set(view)


# ======================================================
#  UI LAYOUT
# ======================================================
ui.page_opts(
    title="US AI Job Market Dashboard",
    fillable=False,
    full_width=True,
    lang="en",
)

with ui.sidebar(open="always", position="left"):
    ui.input_radio_buttons("scene", "View", SCENE_CHOICES, selected="1")

    with ui.panel_conditional("input.scene === '2'"):
        ui.input_slider(
            "slider_position", "Date", min=0, max=1, value=0, step=0.01, ticks=False
        )

        @render.text
        def slider_readout():
            readout = selector.dispatch(DragSlider(input.slider_position()))
            return readout.label

    with ui.panel_conditional("input.scene === '3'"):
        ui.input_select("month", "Month", MONTH_CHOICES)


@render_plotly
def chart():
    return build_figure(present(current_view.get()))
