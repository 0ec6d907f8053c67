"""Scene state machine: selection state, events and view recomputation.

The :class:`ViewSelector` owns the session's :class:`SelectionState` and
is its only mutator.  Each user event has one transition method:

* ``SwitchScene``: move to any scene and recompute that scene's view.
* ``SelectMonth``: change the selected month; recompute only when the
  titles scene is active.
* ``HoverAt``: look up the tooltip of a drawn point (read only).
* ``DragSlider``: map a slider position onto the window (read only).

Transitions replace the frozen state in a single assignment, so the
scene/month pair is never seen half-updated.  Aggregation is never
re-run here; views are recomputed from the session's tables.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple, Union

from .months import ensure_in_window, month_periods, slash_label
from .session import DashboardSession
from .timeline import materialize
from .views import (
    DatasetNotReady,
    NoDataForSelection,
    Scene,
    SliderReadout,
    TimelineView,
    TitleRanking,
    Tooltip,
    View,
    tooltips,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    active_scene: Scene = Scene.POSTINGS
    selected_month_key: Optional[str] = None


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SwitchScene:
    scene: int


@dataclass(frozen=True)
class SelectMonth:
    month_key: str


@dataclass(frozen=True)
class HoverAt:
    index: int


@dataclass(frozen=True)
class DragSlider:
    position: float


Event = Union[SwitchScene, SelectMonth, HoverAt, DragSlider]
Result = Union[View, Tooltip, SliderReadout, None]


class ViewSelector:
    def __init__(self, session: DashboardSession):
        self.session = session
        self._state = SelectionState()
        self._view: Optional[View] = None

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def current_view(self) -> Optional[View]:
        """The most recently computed view, or ``None`` before the first one."""
        return self._view

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: Event) -> Result:
        handler = _TRANSITIONS.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")
        return handler(self, event)

    def switch_scene(self, scene: int) -> View:
        """Activate ``scene`` (no guards) and recompute its view."""
        target = Scene(scene)
        self._state = replace(self._state, active_scene=target)
        logger.debug("Switched to scene %d", target)
        return self.refresh()

    def select_month(self, month_key: str) -> Optional[View]:
        """Select ``month_key``; recompute only if the titles scene is active.

        Raises
        ------
        InvalidMonthKey
            If the key is malformed or outside the session's window.  The
            selection state is left unchanged.
        """
        ensure_in_window(month_key, self.session.window_start, self.session.window_end)
        self._state = replace(self._state, selected_month_key=month_key)
        if self._state.active_scene != Scene.TITLES:
            return None
        return self.refresh()

    def hover_at(self, index: int) -> Optional[Tooltip]:
        """Tooltip for the ``index``-th drawn point of the current view."""
        if self._view is None:
            return None
        hover = tooltips(self._view)
        if not 0 <= index < len(hover):
            return None
        return hover[index]

    def _slider_extent(self) -> Tuple[str, str]:
        """First and last month with salary data, or the window before load."""
        tables = self.session.tables
        if tables is not None:
            drawn = materialize(
                tables.salary_series, self.session.window_start, self.session.window_end
            ).positive("avg_salary")
            if drawn:
                return drawn[0].month_key, drawn[-1].month_key
        return self.session.window_start, self.session.window_end

    def drag_slider(self, position: float) -> SliderReadout:
        """Map a slider position in ``[0, 1]`` onto the salary line's month extent."""
        periods = month_periods(*self._slider_extent())
        clamped = min(1.0, max(0.0, float(position)))
        period = periods[round(clamped * (len(periods) - 1))]
        return SliderReadout(
            position=clamped,
            month_key=period.strftime("%Y-%m"),
            label=slash_label(period),
        )

    # ------------------------------------------------------------------
    # View computation
    # ------------------------------------------------------------------

    def compute_view(self, scene: Scene, month_key: Optional[str] = None) -> View:
        """Pure read of the view for ``scene`` from the session tables."""
        tables = self.session.tables
        if tables is None:
            return DatasetNotReady(scene=scene)
        if scene == Scene.POSTINGS:
            timeline = materialize(
                tables.monthly_stats, self.session.window_start, self.session.window_end
            )
            return TimelineView(scene=scene, timeline=timeline)
        if scene == Scene.SALARY:
            timeline = materialize(
                tables.salary_series, self.session.window_start, self.session.window_end
            )
            return TimelineView(scene=scene, timeline=timeline)
        if month_key is None or month_key not in tables.title_freq:
            return NoDataForSelection(month_key=month_key)
        items = tables.title_freq.top(month_key, self.session.top_n)
        return TitleRanking(month_key=month_key, items=tuple(items))

    def refresh(self) -> View:
        """Recompute the active scene's view from the current state."""
        state = self._state
        self._view = self.compute_view(state.active_scene, state.selected_month_key)
        return self._view


_TRANSITIONS: Dict[type, Callable[[ViewSelector, Event], Result]] = {
    SwitchScene: lambda selector, event: selector.switch_scene(event.scene),
    SelectMonth: lambda selector, event: selector.select_month(event.month_key),
    HoverAt: lambda selector, event: selector.hover_at(event.index),
    DragSlider: lambda selector, event: selector.drag_slider(event.position),
}
