"""Monthly aggregation of normalized job-posting records.

The primary entry point is :func:`aggregate_frame`, which groups the typed
record frame produced by :func:`~jobs_dashboard.normalize.normalize_columns`
into three month-keyed tables; :func:`aggregate` does the same for a
sequence of :class:`~jobs_dashboard.normalize.NormalizedRecord` objects:

* ``MonthlyStats``: posting count plus salary, experience and benefits
  averages per month.
* ``SalarySeries``: the salary projection of the same data, carrying a
  representative date for time-axis charts.
* ``TitleFreq``: job-title counts per month.

Sums and non-null counts come from one ``groupby`` on the posting month;
averages are derived from those columns and every entry is frozen once
built.  The returned tables are read-only.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple, get_args

import pandas as pd

from .config import (
    BENEFITS_COL,
    DATE_COL,
    DEFAULT_MISSING_POLICY,
    EXPERIENCE_COL,
    SALARY_COL,
    TITLE_COL,
    MissingPolicy,
)
from .months import month_key, parse_month_key
from .normalize import NormalizedRecord, records_frame

# Module‑level logger
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Table entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonthlyStatsEntry:
    month_key: str
    year: int
    month: int
    count: int
    total_salary: float
    total_experience: float
    total_benefits: float
    avg_salary: float
    avg_experience: float
    avg_benefits: float

    @classmethod
    def empty(cls, key: str) -> "MonthlyStatsEntry":
        """Zero-valued entry used for months with no postings."""
        period = parse_month_key(key)
        return cls(key, period.year, period.month, 0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class SalarySeriesEntry:
    month_key: str
    date: date
    count: int
    total_salary: float
    avg_salary: float

    @classmethod
    def empty(cls, key: str) -> "SalarySeriesEntry":
        """Zero-valued entry used for months with no postings."""
        period = parse_month_key(key)
        return cls(key, date(period.year, period.month, 1), 0, 0.0, 0.0)


# ---------------------------------------------------------------------------
# Read-only tables
# ---------------------------------------------------------------------------


class _MonthTable(Mapping):
    """Immutable ``month key -> entry`` mapping with DataFrame export."""

    entry_type: type = object

    def __init__(self, entries: Mapping[str, object]):
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, key: str):
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} months)"

    def empty_entry(self, key: str):
        return self.entry_type.empty(key)

    def total_count(self) -> int:
        return sum(entry.count for entry in self._entries.values())

    def to_frame(self) -> pd.DataFrame:
        """Return the table as a DataFrame, one row per month, sorted by key."""
        columns = list(self.entry_type.__dataclass_fields__)
        rows = [asdict(self._entries[key]) for key in sorted(self._entries)]
        return pd.DataFrame(rows, columns=columns)


class MonthlyStats(_MonthTable):
    entry_type = MonthlyStatsEntry


class SalarySeries(_MonthTable):
    entry_type = SalarySeriesEntry


class TitleFreq(Mapping):
    """Immutable ``month key -> {job title -> count}`` table.

    Titles keep the order in which they first appeared in the input.  No
    ordering is applied at build time; :meth:`top` sorts on read.
    """

    def __init__(self, counts: Mapping[str, Mapping[str, int]]):
        self._counts = MappingProxyType(
            {key: MappingProxyType(dict(titles)) for key, titles in counts.items()}
        )

    def __getitem__(self, key: str) -> Mapping[str, int]:
        return self._counts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"TitleFreq({len(self)} months)"

    def top(self, key: str, n: int) -> List[Tuple[str, int]]:
        """Return the ``n`` most frequent titles for ``key``.

        Sorting is stable, so titles with equal counts keep their first
        appearance order.  An absent key yields an empty list.
        """
        titles = self._counts.get(key, {})
        ranked = sorted(titles.items(), key=lambda item: item[1], reverse=True)
        return ranked[:n]

    def to_frame(self) -> pd.DataFrame:
        """Long-format DataFrame with columns ``month_key``, ``job_title``, ``count``."""
        rows = [
            {"month_key": key, "job_title": title, "count": count}
            for key in sorted(self._counts)
            for title, count in self._counts[key].items()
        ]
        return pd.DataFrame(rows, columns=["month_key", "job_title", "count"])


@dataclass(frozen=True)
class AggregateTables:
    monthly_stats: MonthlyStats
    salary_series: SalarySeries
    title_freq: TitleFreq
    record_count: int
    skipped_records: int
    missing_policy: MissingPolicy = DEFAULT_MISSING_POLICY


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

_STATS: Dict[str, str] = {
    "salary": SALARY_COL,
    "experience": EXPERIENCE_COL,
    "benefits": BENEFITS_COL,
}


def _check_policy(missing_policy: str) -> None:
    if missing_policy not in get_args(MissingPolicy):
        raise ValueError(
            f"Unknown missing_policy {missing_policy!r}; "
            f"expected one of {get_args(MissingPolicy)}."
        )


def _month_totals(dated: pd.DataFrame) -> pd.DataFrame:
    """Posting count plus sum and non-null count of each statistic per month."""
    agg_map = {"count": (TITLE_COL, "size")}
    for stat, col in _STATS.items():
        agg_map[f"total_{stat}"] = (col, "sum")
        agg_map[f"n_{stat}"] = (col, "count")
    grouped = dated.groupby("month", sort=True).agg(**agg_map)
    # Divide by contributing-value counts; a month with none averages to 0
    for stat in _STATS:
        denom = grouped[f"n_{stat}"].where(grouped[f"n_{stat}"] > 0)
        grouped[f"avg_{stat}"] = (grouped[f"total_{stat}"] / denom).fillna(0.0)
    return grouped


def _title_counts(dated: pd.DataFrame) -> Dict[str, Dict[str, int]]:
    # sort=False keeps (month, title) groups in first-appearance order
    sizes = dated.groupby(["month", TITLE_COL], sort=False).size()
    titles: Dict[str, Dict[str, int]] = {}
    for (period, title), count in sizes.items():
        titles.setdefault(month_key(period), {})[title] = int(count)
    return titles


def aggregate_frame(
    frame: pd.DataFrame,
    missing_policy: MissingPolicy = DEFAULT_MISSING_POLICY,
) -> AggregateTables:
    """Group a typed record frame into the three monthly aggregate tables.

    Parameters
    ----------
    frame : pd.DataFrame
        Output of :func:`~jobs_dashboard.normalize.normalize_columns` (or
        :func:`~jobs_dashboard.normalize.records_frame`).  Rows whose posting
        date is ``NaT`` are skipped and counted.
    missing_policy : {"zero", "exclude"}
        How missing numeric fields enter the averages.  ``"zero"`` fills
        them with 0 before grouping (the month's record count is the
        denominator); ``"exclude"`` divides each total by its own non-null
        count.

    Returns
    -------
    AggregateTables
        Freshly built, read-only tables plus valid/skipped record counts.
    """
    _check_policy(missing_policy)

    # 1. Drop undated rows and derive the month of every remaining posting
    has_date = frame[DATE_COL].notna()
    skipped = int((~has_date).sum())
    if skipped and logger.isEnabledFor(logging.DEBUG):
        for index in frame.index[~has_date]:
            logger.debug("Skipping record %s: unparseable posting date", index)
    dated = frame.loc[has_date].assign(month=lambda d: d[DATE_COL].dt.to_period("M"))
    if missing_policy == "zero":
        dated = dated.fillna({col: 0.0 for col in _STATS.values()})

    monthly_entries: Dict[str, MonthlyStatsEntry] = {}
    salary_entries: Dict[str, SalarySeriesEntry] = {}
    titles: Dict[str, Dict[str, int]] = {}

    if not dated.empty:
        # 2. Group once per month, then freeze each row into table entries
        for period, row in _month_totals(dated).iterrows():
            key = month_key(period)
            monthly_entries[key] = MonthlyStatsEntry(
                month_key=key,
                year=period.year,
                month=period.month,
                count=int(row["count"]),
                total_salary=float(row["total_salary"]),
                total_experience=float(row["total_experience"]),
                total_benefits=float(row["total_benefits"]),
                avg_salary=float(row["avg_salary"]),
                avg_experience=float(row["avg_experience"]),
                avg_benefits=float(row["avg_benefits"]),
            )
            salary_entries[key] = SalarySeriesEntry(
                month_key=key,
                date=date(period.year, period.month, 1),
                count=int(row["count"]),
                total_salary=float(row["total_salary"]),
                avg_salary=float(row["avg_salary"]),
            )
        titles = _title_counts(dated)

    logger.info(
        "Aggregated %d records into %d months (%d skipped, policy=%s)",
        len(dated),
        len(monthly_entries),
        skipped,
        missing_policy,
    )
    return AggregateTables(
        monthly_stats=MonthlyStats(monthly_entries),
        salary_series=SalarySeries(salary_entries),
        title_freq=TitleFreq(titles),
        record_count=len(dated),
        skipped_records=skipped,
        missing_policy=missing_policy,
    )


def aggregate(
    records: Iterable[NormalizedRecord],
    missing_policy: MissingPolicy = DEFAULT_MISSING_POLICY,
) -> AggregateTables:
    """Aggregate normalized records, in any order; see :func:`aggregate_frame`."""
    return aggregate_frame(records_frame(records), missing_policy=missing_policy)
