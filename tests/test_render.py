from datetime import date

import pytest

from jobs_dashboard.render import (
    NO_DATA_MESSAGE,
    NO_SELECTION_MESSAGE,
    NOT_READY_MESSAGE,
    present,
)
from jobs_dashboard.selection import SelectMonth, SwitchScene
from jobs_dashboard.views import DatasetNotReady, NoDataForSelection, Scene, TitleRanking

pytestmark = pytest.mark.unit


def test_postings_command(selector):
    command = present(selector.dispatch(SwitchScene(1)))

    assert command.kind == "bar"
    assert command.scene == Scene.POSTINGS
    assert len(command.x) == len(command.y) == len(command.hover) == 16
    assert command.x[0] == "Jan 2024"
    assert command.y[:3] == (1, 0, 3)
    assert command.value_max == pytest.approx(3 * 1.1)
    assert command.highlight == 2
    assert (command.x_title, command.y_title) == ("Month", "Number of Job Postings")


def test_postings_markers(selector):
    command = present(selector.dispatch(SwitchScene(1)))
    peak, trough = command.markers

    assert (peak.kind, peak.index, peak.x, peak.y) == ("peak", 2, "Mar 2024", 3)
    assert peak.text == "Peak: 3 jobs"
    assert (trough.kind, trough.x, trough.y) == ("trough", "Feb 2024", 0)


def test_salary_command_draws_positive_points_with_dense_domain(selector):
    command = present(selector.dispatch(SwitchScene(2)))

    assert command.kind == "line"
    assert command.x_kind == "temporal"
    assert command.x == (date(2024, 1, 1), date(2024, 3, 1), date(2024, 12, 1), date(2025, 1, 1))
    assert all(value > 0 for value in command.y)
    assert command.value_max == pytest.approx(150000.0 * 1.1)
    assert command.x_range == (date(2024, 1, 1), date(2025, 4, 1))
    assert len(command.hover) == len(command.x)


def test_titles_command(selector):
    selector.dispatch(SelectMonth("2024-03"))
    command = present(selector.dispatch(SwitchScene(3)))

    assert command.kind == "hbar"
    assert command.y == ("ML Engineer", "Data Scientist")
    assert command.x == (2, 1)
    assert command.value_max == 2.0
    assert command.hover[0].lines == ("Number of Jobs: 2",)


def test_no_data_and_not_ready_are_distinguishable():
    no_selection = present(NoDataForSelection(month_key=None))
    no_data = present(NoDataForSelection(month_key="2024-02"))
    not_ready = present(DatasetNotReady(scene=Scene.SALARY))

    assert no_selection.message == NO_SELECTION_MESSAGE
    assert no_data.message == NO_DATA_MESSAGE
    assert not_ready.message == NOT_READY_MESSAGE
    assert not_ready.scene == Scene.SALARY
    assert {no_selection.kind, no_data.kind, not_ready.kind} == {"message"}


def test_present_rejects_unknown_view():
    with pytest.raises(TypeError):
        present(object())


def test_empty_ranking_presents_without_error():
    command = present(TitleRanking(month_key="2024-03", items=()))

    assert command.kind == "hbar"
    assert command.x == command.y == command.hover == ()
    assert command.value_max == 0.0
