"""Render adapter: computed views to renderer-neutral draw commands.

:func:`present` is a pure function from a view result to a
:class:`RenderCommand`.  The command carries plain data only (series,
axis kinds and titles, value-axis domain, annotation markers and one
tooltip per drawn point), so any charting library can consume it.  The
Plotly translation lives in :mod:`jobs_dashboard.plotting`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional, Tuple

from .config import AXIS_TITLES, SCENE_OPTIONS, Y_DOMAIN_PADDING
from .views import (
    DatasetNotReady,
    NoDataForSelection,
    Scene,
    TimelineView,
    TitleRanking,
    Tooltip,
    View,
    drawn_points,
    tooltips,
)

AxisKind = Literal["categorical", "temporal", "numeric"]
CommandKind = Literal["bar", "line", "hbar", "message"]

SCENE_TITLES = {Scene(value): label for label, value in SCENE_OPTIONS}

NO_DATA_MESSAGE = "No data available for this month"
NO_SELECTION_MESSAGE = "Select a month to see its most popular job titles"
NOT_READY_MESSAGE = "Dataset is still loading"


@dataclass(frozen=True)
class Marker:
    kind: Literal["peak", "trough"]
    index: int
    x: object
    y: float
    text: str


@dataclass(frozen=True)
class RenderCommand:
    kind: CommandKind
    scene: Scene
    title: str
    x: Tuple = ()
    y: Tuple = ()
    x_kind: AxisKind = "categorical"
    y_kind: AxisKind = "numeric"
    x_title: str = ""
    y_title: str = ""
    value_max: Optional[float] = None
    x_range: Optional[Tuple[date, date]] = None
    highlight: Optional[int] = None
    markers: Tuple[Marker, ...] = ()
    hover: Tuple[Tooltip, ...] = ()
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Commands per view
# ---------------------------------------------------------------------------


def _present_postings(view: TimelineView) -> RenderCommand:
    timeline = view.timeline
    peak, trough = timeline.peak, timeline.trough
    x_title, y_title = AXIS_TITLES[Scene.POSTINGS]
    return RenderCommand(
        kind="bar",
        scene=Scene.POSTINGS,
        title=SCENE_TITLES[Scene.POSTINGS],
        x=tuple(point.label for point in timeline),
        y=tuple(point.count for point in timeline),
        x_kind="categorical",
        x_title=x_title,
        y_title=y_title,
        value_max=timeline.max_value("count") * Y_DOMAIN_PADDING,
        highlight=peak.index,
        markers=(
            Marker("peak", peak.index, peak.label, peak.count, f"Peak: {peak.count} jobs"),
            Marker("trough", trough.index, trough.label, trough.count, f"Low: {trough.count} jobs"),
        ),
        hover=tooltips(view),
    )


def _present_salary(view: TimelineView) -> RenderCommand:
    timeline = view.timeline
    drawn = drawn_points(view)
    x_title, y_title = AXIS_TITLES[Scene.SALARY]
    return RenderCommand(
        kind="line",
        scene=Scene.SALARY,
        title=SCENE_TITLES[Scene.SALARY],
        x=tuple(point.date for point in drawn),
        y=tuple(point.value("avg_salary") for point in drawn),
        x_kind="temporal",
        x_title=x_title,
        y_title=y_title,
        # Domains come from the full dense sequence, zeros included
        value_max=timeline.max_value("avg_salary") * Y_DOMAIN_PADDING,
        x_range=(timeline[0].date, timeline[-1].date),
        hover=tooltips(view),
    )


def _present_titles(view: TitleRanking) -> RenderCommand:
    x_title, y_title = AXIS_TITLES[Scene.TITLES]
    counts = tuple(count for _, count in view.items)
    return RenderCommand(
        kind="hbar",
        scene=Scene.TITLES,
        title=SCENE_TITLES[Scene.TITLES],
        x=counts,
        y=tuple(title for title, _ in view.items),
        x_kind="numeric",
        y_kind="categorical",
        x_title=x_title,
        y_title=y_title,
        value_max=float(max(counts, default=0)),
        hover=tooltips(view),
    )


def _present_message(scene: Scene, message: str) -> RenderCommand:
    return RenderCommand(
        kind="message", scene=scene, title=SCENE_TITLES[scene], message=message
    )


def present(view: View) -> RenderCommand:
    """Translate a view result into a :class:`RenderCommand`."""
    if isinstance(view, TimelineView):
        if view.scene == Scene.SALARY:
            return _present_salary(view)
        return _present_postings(view)
    if isinstance(view, TitleRanking):
        return _present_titles(view)
    if isinstance(view, NoDataForSelection):
        message = NO_SELECTION_MESSAGE if view.month_key is None else NO_DATA_MESSAGE
        return _present_message(view.scene, message)
    if isinstance(view, DatasetNotReady):
        return _present_message(view.scene, NOT_READY_MESSAGE)
    raise TypeError(f"Cannot present view of type {type(view).__name__}")
