"""Scene identifiers, the view results handed to the render adapter, and
the tooltip text built for every drawn point."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple, Union

from .timeline import Timeline, TimelinePoint


class Scene(IntEnum):
    POSTINGS = 1
    SALARY = 2
    TITLES = 3


@dataclass(frozen=True)
class TimelineView:
    """Dense timeline feeding Scene 1 (monthly stats) or Scene 2 (salary)."""

    scene: Scene
    timeline: Timeline


@dataclass(frozen=True)
class TitleRanking:
    """Top job titles for one month, most frequent first."""

    month_key: str
    items: Tuple[Tuple[str, int], ...]
    scene: Scene = Scene.TITLES


@dataclass(frozen=True)
class NoDataForSelection:
    """A valid (or unset) month selection with no job-title data."""

    month_key: Optional[str]
    scene: Scene = Scene.TITLES


@dataclass(frozen=True)
class DatasetNotReady:
    """Returned for any read attempted before the dataset is aggregated."""

    scene: Scene


View = Union[TimelineView, TitleRanking, NoDataForSelection, DatasetNotReady]


@dataclass(frozen=True)
class Tooltip:
    title: str
    lines: Tuple[str, ...]

    def as_html(self) -> str:
        return "<br>".join([f"<b>{self.title}</b>", *self.lines])


@dataclass(frozen=True)
class SliderReadout:
    position: float
    month_key: str
    label: str


# ---------------------------------------------------------------------------
# Tooltips
# ---------------------------------------------------------------------------


def _money(value: float) -> str:
    return f"${value:,.0f}"


def postings_tooltip(point: TimelinePoint) -> Tooltip:
    return Tooltip(
        title=point.label,
        lines=(
            f"Job Postings: {point.count}",
            f"Average Salary: {_money(point.value('avg_salary'))}",
            f"Average Experience: {point.value('avg_experience'):.1f} years",
            f"Average Benefits Score: {point.value('avg_benefits'):.1f}",
        ),
    )


def salary_tooltip(point: TimelinePoint) -> Tooltip:
    return Tooltip(
        title=point.short_label,
        lines=(f"Average Salary: {_money(point.value('avg_salary'))}",),
    )


def title_tooltip(title: str, count: int) -> Tooltip:
    return Tooltip(title=title, lines=(f"Number of Jobs: {count}",))


def drawn_points(view: TimelineView) -> List[TimelinePoint]:
    """Points actually drawn for a timeline view.

    Scene 1 draws every month; Scene 2 draws only months with a positive
    average salary so the line does not dip to zero across gaps.
    """
    if view.scene == Scene.SALARY:
        return view.timeline.positive("avg_salary")
    return list(view.timeline)


def tooltips(view: View) -> Tuple[Tooltip, ...]:
    """One tooltip per drawn point, indexed like the drawn series."""
    if isinstance(view, TimelineView):
        build = salary_tooltip if view.scene == Scene.SALARY else postings_tooltip
        return tuple(build(point) for point in drawn_points(view))
    if isinstance(view, TitleRanking):
        return tuple(title_tooltip(title, count) for title, count in view.items)
    return ()
