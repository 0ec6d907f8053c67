"""Dense timeline materialization over a fixed month window.

Aggregate tables are sparse: a month with no postings has no entry.  The
charts need one point per calendar month so that band scales and
"maximum across the series" computations never special-case a gap.
:func:`materialize` expands a ``MonthlyStats`` or ``SalarySeries`` table
into such a dense sequence, filling absent months with zero-valued entries,
and picks the peak and trough months used by the annotation overlay.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Iterator, List, Sequence, Tuple, Union

import pandas as pd

from .aggregate import MonthlyStats, MonthlyStatsEntry, SalarySeries, SalarySeriesEntry
from .months import month_label, month_periods, slash_label

Entry = Union[MonthlyStatsEntry, SalarySeriesEntry]


@dataclass(frozen=True)
class TimelinePoint:
    index: int
    month_key: str
    date: date
    label: str
    short_label: str
    present: bool
    entry: Entry

    @property
    def count(self) -> int:
        return self.entry.count

    def value(self, name: str) -> float:
        """Statistic ``name`` of this month; statistics the table lacks read as 0."""
        return getattr(self.entry, name, 0.0)


def find_peak(points: Sequence[TimelinePoint]) -> TimelinePoint:
    """Point with the strictly greatest count; the earliest wins ties."""
    best = points[0]
    for point in points[1:]:
        if point.count > best.count:
            best = point
    return best


def find_trough(points: Sequence[TimelinePoint]) -> TimelinePoint:
    """Point with the strictly smallest count; the earliest wins ties."""
    best = points[0]
    for point in points[1:]:
        if point.count < best.count:
            best = point
    return best


@dataclass(frozen=True)
class Timeline:
    points: Tuple[TimelinePoint, ...]
    window_start: str
    window_end: str
    peak: TimelinePoint
    trough: TimelinePoint

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TimelinePoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> TimelinePoint:
        return self.points[index]

    @property
    def month_keys(self) -> List[str]:
        return [point.month_key for point in self.points]

    def series(self, name: str) -> List[float]:
        return [point.value(name) for point in self.points]

    def max_value(self, name: str) -> float:
        """Maximum of ``name`` over the full dense sequence, zeros included."""
        return max(self.series(name))

    def positive(self, name: str) -> List[TimelinePoint]:
        """Points whose ``name`` value is strictly positive, in order."""
        return [point for point in self.points if point.value(name) > 0]

    def to_frame(self) -> pd.DataFrame:
        """Return the dense timeline as a DataFrame (one row per month)."""
        rows = []
        for point in self.points:
            row = asdict(point.entry)
            row.update(
                month_key=point.month_key,
                date=point.date,
                label=point.label,
                present=point.present,
            )
            rows.append(row)
        return pd.DataFrame(rows)


def materialize(
    table: Union[MonthlyStats, SalarySeries],
    window_start: str,
    window_end: str,
) -> Timeline:
    """Expand a sparse month-keyed table over an inclusive month window.

    Parameters
    ----------
    table : MonthlyStats or SalarySeries
        Aggregate table keyed by ``YYYY-MM``.
    window_start, window_end : str
        Inclusive window bounds as month keys.

    Returns
    -------
    Timeline
        Exactly one point per calendar month of the window, in order, with
        the peak and trough months resolved.

    Raises
    ------
    InvalidMonthKey
        If either bound is malformed or ``window_start > window_end``.
    """
    points = []
    for index, period in enumerate(month_periods(window_start, window_end)):
        key = period.strftime("%Y-%m")
        present = key in table
        points.append(
            TimelinePoint(
                index=index,
                month_key=key,
                date=date(period.year, period.month, 1),
                label=month_label(period),
                short_label=slash_label(period),
                present=present,
                entry=table[key] if present else table.empty_entry(key),
            )
        )
    return Timeline(
        points=tuple(points),
        window_start=window_start,
        window_end=window_end,
        peak=find_peak(points),
        trough=find_trough(points),
    )
