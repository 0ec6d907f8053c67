"""Session-scoped owner of the aggregate tables.

A :class:`DashboardSession` starts in a not-ready state and accepts exactly
one dataset load.  The tables it holds are built once by
:mod:`~jobs_dashboard.aggregate` and never modified afterwards.
Readers check :attr:`DashboardSession.is_ready` instead of receiving empty
default tables that could be mistaken for months without postings.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from .aggregate import AggregateTables, aggregate, aggregate_frame
from .config import (
    DEFAULT_MISSING_POLICY,
    TOP_N_TITLES,
    WINDOW_END,
    WINDOW_START,
    MissingPolicy,
)
from .data_manager import load_dataset
from .months import month_label, month_periods
from .normalize import NormalizedRecord, normalize_columns

logger = logging.getLogger(__name__)


class DashboardSession:
    def __init__(
        self,
        *,
        window_start: str = WINDOW_START,
        window_end: str = WINDOW_END,
        missing_policy: MissingPolicy = DEFAULT_MISSING_POLICY,
        top_n: int = TOP_N_TITLES,
    ):
        # Validates the window eagerly so a bad configuration fails at startup
        month_periods(window_start, window_end)
        if top_n < 1:
            raise ValueError(f"top_n must be at least 1, got {top_n!r}.")
        self.window_start = window_start
        self.window_end = window_end
        self.missing_policy = missing_policy
        self.top_n = top_n
        self._tables: Optional[AggregateTables] = None

    @property
    def is_ready(self) -> bool:
        return self._tables is not None

    @property
    def tables(self) -> Optional[AggregateTables]:
        """The aggregate tables, or ``None`` while the dataset is not loaded."""
        return self._tables

    def _ensure_unloaded(self) -> None:
        if self._tables is not None:
            raise RuntimeError("Dataset already loaded for this session.")

    def _store(self, tables: AggregateTables) -> AggregateTables:
        self._ensure_unloaded()
        self._tables = tables
        return tables

    def load_records(self, records: Iterable[NormalizedRecord]) -> AggregateTables:
        """Aggregate normalized records; allowed once per session."""
        self._ensure_unloaded()
        return self._store(aggregate(records, missing_policy=self.missing_policy))

    def _build_tables(self, df: pd.DataFrame) -> AggregateTables:
        logger.info("Normalizing %d raw rows", len(df))
        return aggregate_frame(normalize_columns(df), missing_policy=self.missing_policy)

    def _read_and_build(self, source: str | Path | None) -> AggregateTables:
        return self._build_tables(load_dataset(source))

    def load_frame(self, df: pd.DataFrame) -> AggregateTables:
        """Normalize and aggregate a raw DataFrame of postings."""
        self._ensure_unloaded()
        return self._store(self._build_tables(df))

    async def load_source(self, source: str | Path | None = None) -> AggregateTables:
        """Fetch, normalize and aggregate the dataset off the event loop."""
        self._ensure_unloaded()
        tables = await asyncio.to_thread(self._read_and_build, source)
        return self._store(tables)

    def month_options(self) -> List[Tuple[str, str]]:
        """``(month key, "Mon YYYY")`` pairs for every month in the window."""
        return [
            (period.strftime("%Y-%m"), month_label(period))
            for period in month_periods(self.window_start, self.window_end)
        ]
