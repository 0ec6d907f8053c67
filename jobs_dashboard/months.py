"""Month-key helpers shared by the aggregation and timeline modules.

A month key is the canonical ``YYYY-MM`` string used to group postings by
calendar month.  Zero padding keeps lexicographic order identical to
chronological order, so plain ``sorted()`` on keys is always safe.
"""

from __future__ import annotations

import re
from datetime import date
from typing import List

import pandas as pd

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")


class InvalidMonthKey(ValueError):
    """Raised for malformed month keys, out-of-window keys and inverted windows."""


def month_key(value: date) -> str:
    """Return the ``YYYY-MM`` key of a calendar date or monthly ``pd.Period``."""
    return f"{value.year:04d}-{value.month:02d}"


def parse_month_key(key: str) -> pd.Period:
    """Parse a ``YYYY-MM`` key into a monthly ``pd.Period``.

    Raises
    ------
    InvalidMonthKey
        If ``key`` is not a string of the exact form ``YYYY-MM`` with a
        month between 01 and 12.
    """
    if not isinstance(key, str):
        raise InvalidMonthKey(f"Month key must be a string, got {type(key).__name__}")
    match = _MONTH_KEY_RE.match(key)
    if match is None or not 1 <= int(match.group(2)) <= 12:
        raise InvalidMonthKey(f"Malformed month key {key!r}; expected 'YYYY-MM'.")
    return pd.Period(year=int(match.group(1)), month=int(match.group(2)), freq="M")


def month_periods(window_start: str, window_end: str) -> pd.PeriodIndex:
    """Return every month in the inclusive window as a ``PeriodIndex``.

    Calendar-month arithmetic is delegated to ``pandas.period_range`` so
    year boundaries roll over correctly (Dec 2024 is followed by Jan 2025).
    """
    start = parse_month_key(window_start)
    end = parse_month_key(window_end)
    if start > end:
        raise InvalidMonthKey(
            f"Window start {window_start} is after window end {window_end}."
        )
    return pd.period_range(start=start, end=end, freq="M")


def month_keys(window_start: str, window_end: str) -> List[str]:
    """List the ``YYYY-MM`` keys of an inclusive window in order."""
    return [period.strftime("%Y-%m") for period in month_periods(window_start, window_end)]


def month_label(period: pd.Period) -> str:
    """Display label used on category axes, e.g. ``"Mar 2024"``."""
    return period.strftime("%b %Y")


def slash_label(period: pd.Period) -> str:
    """Short ``M/YYYY`` label used by the salary tooltip and date slider."""
    return f"{period.month}/{period.year}"


def ensure_in_window(key: str, window_start: str, window_end: str) -> pd.Period:
    """Validate ``key`` and check it falls inside the inclusive window."""
    period = parse_month_key(key)
    start = parse_month_key(window_start)
    end = parse_month_key(window_end)
    if not start <= period <= end:
        raise InvalidMonthKey(
            f"Month key {key!r} is outside the window {window_start}..{window_end}."
        )
    return period
