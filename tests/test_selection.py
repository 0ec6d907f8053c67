import ast
import inspect

import pytest

from jobs_dashboard import selection as selection_module
from jobs_dashboard.months import InvalidMonthKey
from jobs_dashboard.normalize import normalize
from jobs_dashboard.selection import (
    DragSlider,
    HoverAt,
    SelectionState,
    SelectMonth,
    SwitchScene,
    ViewSelector,
)
from jobs_dashboard.session import DashboardSession
from jobs_dashboard.views import (
    DatasetNotReady,
    NoDataForSelection,
    Scene,
    SliderReadout,
    TimelineView,
    TitleRanking,
    Tooltip,
)

from .helpers import raw_row

pytestmark = pytest.mark.unit


def test_initial_state(selector):
    assert selector.state == SelectionState(Scene.POSTINGS, None)
    assert selector.current_view is None


def test_switch_scene_postings_materializes_monthly_stats(selector):
    view = selector.dispatch(SwitchScene(1))

    assert isinstance(view, TimelineView)
    assert view.scene == Scene.POSTINGS
    assert len(view.timeline) == 16
    assert view.timeline.peak.month_key == "2024-03"
    assert selector.current_view is view


def test_switch_scene_salary_materializes_salary_series(selector):
    view = selector.dispatch(SwitchScene(Scene.SALARY))

    assert isinstance(view, TimelineView)
    assert view.scene == Scene.SALARY
    assert view.timeline[0].date.day == 1
    assert selector.state.active_scene == Scene.SALARY


def test_any_scene_reachable_from_any_scene(selector):
    for scene in (3, 1, 2, 3, 2, 1):
        selector.dispatch(SwitchScene(scene))
        assert selector.state.active_scene == scene


def test_invalid_scene_leaves_state_unchanged(selector):
    selector.dispatch(SwitchScene(2))
    with pytest.raises(ValueError):
        selector.dispatch(SwitchScene(4))
    assert selector.state.active_scene == Scene.SALARY


def test_titles_scene_without_selection_is_no_data(selector):
    view = selector.dispatch(SwitchScene(3))
    assert view == NoDataForSelection(month_key=None)


def test_select_month_is_lazy_outside_titles_scene(selector):
    result = selector.dispatch(SelectMonth("2024-03"))

    assert result is None
    assert selector.state == SelectionState(Scene.POSTINGS, "2024-03")
    assert selector.current_view is None


def test_select_month_then_switch_to_titles(selector):
    selector.dispatch(SelectMonth("2024-03"))
    view = selector.dispatch(SwitchScene(3))

    assert view == TitleRanking(
        month_key="2024-03", items=(("ML Engineer", 2), ("Data Scientist", 1))
    )


def test_select_month_recomputes_when_titles_active(selector):
    selector.dispatch(SwitchScene(3))
    view = selector.dispatch(SelectMonth("2025-01"))

    assert isinstance(view, TitleRanking)
    assert view.items == (("Research Scientist", 2),)


def test_select_month_without_titles_is_no_data(selector):
    selector.dispatch(SwitchScene(3))
    view = selector.dispatch(SelectMonth("2024-02"))

    assert isinstance(view, NoDataForSelection)
    assert view.month_key == "2024-02"


@pytest.mark.parametrize("bad", ["2024-2", "March", "2023-12", "2025-05"])
def test_select_month_rejects_malformed_or_out_of_window(selector, bad):
    selector.dispatch(SelectMonth("2024-03"))
    with pytest.raises(InvalidMonthKey):
        selector.dispatch(SelectMonth(bad))
    assert selector.state.selected_month_key == "2024-03"


def test_top_titles_truncated_to_top_n(ready_session):
    ready_session.top_n = 1
    selector = ViewSelector(ready_session)
    selector.dispatch(SelectMonth("2024-03"))
    view = selector.dispatch(SwitchScene(3))
    assert view.items == (("ML Engineer", 2),)


def test_not_ready_session_returns_signal(session):
    selector = ViewSelector(session)

    for scene in Scene:
        assert selector.dispatch(SwitchScene(scene)) == DatasetNotReady(scene=scene)

    assert selector.dispatch(SelectMonth("2024-03")) == DatasetNotReady(scene=Scene.TITLES)


def test_session_becomes_ready_after_load(session, mixed_records):
    selector = ViewSelector(session)
    assert isinstance(selector.dispatch(SwitchScene(1)), DatasetNotReady)

    session.load_records(mixed_records)
    assert isinstance(selector.refresh(), TimelineView)


def test_hover_on_postings_view(selector):
    selector.dispatch(SwitchScene(1))
    tip = selector.dispatch(HoverAt(2))

    assert isinstance(tip, Tooltip)
    assert tip.title == "Mar 2024"
    assert tip.lines[0] == "Job Postings: 3"
    assert tip.lines[1] == "Average Salary: $103,333"
    assert tip.lines[2] == "Average Experience: 3.3 years"
    assert tip.lines[3] == "Average Benefits Score: 7.3"


def test_hover_indexes_drawn_salary_points(selector):
    selector.dispatch(SwitchScene(2))
    tip = selector.dispatch(HoverAt(1))

    assert tip == Tooltip(title="3/2024", lines=("Average Salary: $103,333",))


def test_hover_out_of_range_or_before_any_view(selector):
    assert selector.dispatch(HoverAt(0)) is None
    selector.dispatch(SwitchScene(1))
    assert selector.dispatch(HoverAt(16)) is None
    assert selector.dispatch(HoverAt(-1)) is None


def test_hover_on_titles(selector):
    selector.dispatch(SelectMonth("2024-03"))
    selector.dispatch(SwitchScene(3))
    assert selector.dispatch(HoverAt(1)) == Tooltip("Data Scientist", ("Number of Jobs: 1",))


@pytest.mark.parametrize(
    "position, key, label",
    [
        (0.0, "2024-01", "1/2024"),
        (0.5, "2024-07", "7/2024"),
        (1.0, "2025-01", "1/2025"),
        (-3, "2024-01", "1/2024"),
        (7, "2025-01", "1/2025"),
    ],
)
def test_drag_slider_clamps_and_maps_to_salary_months(selector, position, key, label):
    # Salary data spans 2024-01 .. 2025-01, not the whole window
    readout = selector.dispatch(DragSlider(position))

    assert isinstance(readout, SliderReadout)
    assert readout.month_key == key
    assert readout.label == label
    assert 0.0 <= readout.position <= 1.0


def test_drag_slider_uses_window_before_load(session):
    selector = ViewSelector(session)
    assert selector.dispatch(DragSlider(0.0)).month_key == "2024-01"
    assert selector.dispatch(DragSlider(1.0)).label == "4/2025"


def test_drag_slider_uses_window_without_salary_data():
    session = DashboardSession()
    session.load_records([normalize(raw_row("2024-06-01", title="Analyst"))])
    readout = ViewSelector(session).dispatch(DragSlider(1.0))
    assert readout.month_key == "2025-04"


def test_read_only_events_do_not_touch_state(selector):
    selector.dispatch(SwitchScene(2))
    before = selector.state
    selector.dispatch(HoverAt(0))
    selector.dispatch(DragSlider(0.5))
    assert selector.state is before


def test_unknown_event_rejected(selector):
    with pytest.raises(TypeError):
        selector.dispatch("switch")


def test_selection_does_not_depend_on_render_adapter():
    tree = ast.parse(inspect.getsource(selection_module))
    imported = {
        node.module
        for node in ast.walk(tree)
        if isinstance(node, ast.ImportFrom) and node.module
    }
    assert "render" not in imported
    assert "plotting" not in imported
