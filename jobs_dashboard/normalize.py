"""Record normalization: raw string rows to typed job-posting records.

Normalization never raises.  An unparseable posting date marks the record
as invalid (``posting_date is None``) so the aggregation step can skip and
count it; unparseable numeric fields become ``None`` and are resolved by
the missing-value policy when averages are computed.

:func:`normalize` handles a single row.  Whole datasets go through
:func:`normalize_columns`, which coerces each column at once and yields the
typed frame the aggregation step groups on.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

from .config import (
    BENEFITS_COL,
    DATE_COL,
    EXPERIENCE_COL,
    REQUIRED_COLUMNS,
    SALARY_COL,
    TITLE_COL,
    UNKNOWN_TITLE,
)


@dataclass(frozen=True)
class NormalizedRecord:
    posting_date: Optional[date]
    salary_usd: Optional[float]
    years_experience: Optional[float]
    benefits_score: Optional[float]
    job_title: str

    @property
    def is_valid(self) -> bool:
        return self.posting_date is not None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_number(value: Any, *, non_negative: bool = False) -> Optional[float]:
    """Coerce a raw cell to a finite float, or ``None`` when missing/invalid."""
    if _is_blank(value):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        number = pd.to_numeric(value, errors="coerce")
    except (TypeError, ValueError):
        return None
    if pd.isna(number) or not math.isfinite(float(number)):
        return None
    if non_negative and number < 0:
        return None
    return float(number)


def parse_date(value: Any) -> Optional[date]:
    """Parse a raw cell to a calendar date, or ``None`` when unparseable."""
    if _is_blank(value):
        return None
    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts.date()


def normalize(raw: Mapping[str, Any]) -> NormalizedRecord:
    """Convert one raw row into a :class:`NormalizedRecord`."""
    title = raw.get(TITLE_COL)
    title = UNKNOWN_TITLE if _is_blank(title) else str(title).strip()
    return NormalizedRecord(
        posting_date=parse_date(raw.get(DATE_COL)),
        salary_usd=parse_number(raw.get(SALARY_COL), non_negative=True),
        years_experience=parse_number(raw.get(EXPERIENCE_COL), non_negative=True),
        benefits_score=parse_number(raw.get(BENEFITS_COL)),
        job_title=title,
    )


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series([None] * len(df), index=df.index, dtype=object)


def _number_column(column: pd.Series, *, non_negative: bool = False) -> pd.Series:
    numbers = pd.to_numeric(column.astype(str).str.strip(), errors="coerce").astype(float)
    numbers = numbers.where(~numbers.isin([math.inf, -math.inf]))
    if non_negative:
        numbers = numbers.where(numbers >= 0)
    return numbers


def _title_column(column: pd.Series) -> pd.Series:
    titles = column.astype("string").str.strip().fillna("")
    return titles.mask(titles == "", UNKNOWN_TITLE).astype(object)


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Coerce a raw DataFrame column-wise into typed record columns.

    Dates become ``datetime64`` (``NaT`` when unparseable), numeric fields
    become ``float64`` (``NaN`` when missing, non-finite or, for salary and
    experience, negative) and titles are stripped with blanks mapped to
    ``"Unknown"``.  Absent columns are treated as entirely missing.
    """
    return pd.DataFrame(
        {
            DATE_COL: pd.to_datetime(
                _column(df, DATE_COL), errors="coerce", format="mixed"
            ),
            SALARY_COL: _number_column(_column(df, SALARY_COL), non_negative=True),
            EXPERIENCE_COL: _number_column(
                _column(df, EXPERIENCE_COL), non_negative=True
            ),
            BENEFITS_COL: _number_column(_column(df, BENEFITS_COL)),
            TITLE_COL: _title_column(_column(df, TITLE_COL)),
        },
        index=df.index,
    )


def _optional(value: Any) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def normalize_frame(df: pd.DataFrame) -> List[NormalizedRecord]:
    """Normalize every row of a raw DataFrame, preserving row order."""
    typed = normalize_columns(df)
    return [
        NormalizedRecord(
            posting_date=None if pd.isna(ts) else ts.date(),
            salary_usd=_optional(salary),
            years_experience=_optional(experience),
            benefits_score=_optional(benefits),
            job_title=title,
        )
        for ts, salary, experience, benefits, title in zip(
            typed[DATE_COL],
            typed[SALARY_COL],
            typed[EXPERIENCE_COL],
            typed[BENEFITS_COL],
            typed[TITLE_COL],
        )
    ]


def records_frame(records: Iterable[NormalizedRecord]) -> pd.DataFrame:
    """Typed-column DataFrame of already normalized records."""
    frame = pd.DataFrame(
        [
            (r.posting_date, r.salary_usd, r.years_experience, r.benefits_score, r.job_title)
            for r in records
        ],
        columns=REQUIRED_COLUMNS,
    )
    frame[DATE_COL] = pd.to_datetime(frame[DATE_COL])
    numeric = [SALARY_COL, EXPERIENCE_COL, BENEFITS_COL]
    frame[numeric] = frame[numeric].astype(float)
    return frame
