"""Shared pytest fixtures for the dashboard test suite.

Raw rows are plain dicts of strings, the way ``pandas.read_csv(dtype=str)``
hands them to the normalizer.
"""

import pytest

from jobs_dashboard.aggregate import aggregate
from jobs_dashboard.normalize import normalize
from jobs_dashboard.selection import ViewSelector
from jobs_dashboard.session import DashboardSession

from .helpers import raw_row


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def example_rows():
    """Three March 2024 postings: two ML Engineers and one Data Scientist."""
    return [
        raw_row("2024-03-05", "100000", "3", "7.5", "ML Engineer"),
        raw_row("2024-03-20", "120000", "5", "8.0", "ML Engineer"),
        raw_row("2024-03-20", "90000", "2", "6.5", "Data Scientist"),
    ]


@pytest.fixture
def mixed_rows(example_rows):
    """Postings across several months, including year roll-over and bad rows."""
    return example_rows + [
        raw_row("2024-01-10", "80000", "1", "5", "Analyst"),
        raw_row("2024-12-31", "150000", "10", "9", "ML Engineer"),
        raw_row("2025-01-02", "130000", "7", "8", "Research Scientist"),
        raw_row("2025-01-15", "n/a", "", "7", "Research Scientist"),
        raw_row("not a date", "99999", "4", "6", "Ghost"),
        raw_row("", "50000", "1", "5", "Ghost"),
    ]


@pytest.fixture
def example_records(example_rows):
    return [normalize(row) for row in example_rows]


@pytest.fixture
def mixed_records(mixed_rows):
    return [normalize(row) for row in mixed_rows]


@pytest.fixture
def mixed_tables(mixed_records):
    return aggregate(mixed_records)


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def session():
    """Session that has not loaded a dataset yet."""
    return DashboardSession()


@pytest.fixture
def ready_session(mixed_records):
    s = DashboardSession()
    s.load_records(mixed_records)
    return s


@pytest.fixture
def selector(ready_session):
    return ViewSelector(ready_session)
