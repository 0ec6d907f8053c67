"""
Configuration constants for the AI job-postings dashboard.
"""

from typing import Dict, List, Literal, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
DATASET_SOURCE: str = "us_ai_job_dataset.csv"

# Environment variable that overrides ``DATASET_SOURCE`` (path or URL)
DATASET_SOURCE_ENV: str = "JOBS_DATASET_SOURCE"

DEFAULT_SEP: str = ","

DATE_COL: str = "posting_date"
SALARY_COL: str = "salary_usd"
EXPERIENCE_COL: str = "years_experience"
BENEFITS_COL: str = "benefits_score"
TITLE_COL: str = "job_title"

REQUIRED_COLUMNS: List[str] = [
    DATE_COL,
    SALARY_COL,
    EXPERIENCE_COL,
    BENEFITS_COL,
    TITLE_COL,
]

UNKNOWN_TITLE: str = "Unknown"

# ======================================================
#  AGGREGATION
# ======================================================
# "zero": missing numeric fields count as 0 in averages (legacy behaviour).
# "exclude": missing fields are left out of that statistic's average.
MissingPolicy = Literal["zero", "exclude"]
DEFAULT_MISSING_POLICY: MissingPolicy = "zero"

# ======================================================
#  TIMELINE / SELECTION
# ======================================================
# Inclusive month window shown on the time-indexed scenes
WINDOW_START: str = "2024-01"
WINDOW_END: str = "2025-04"

TOP_N_TITLES: int = 5

# Headroom above the series maximum for the y-axis domain
Y_DOMAIN_PADDING: float = 1.1

# ======================================================
#  UI DEFAULTS
# ======================================================
SCENE_OPTIONS: List[Tuple[str, int]] = [
    ("Job Postings Over Time", 1),
    ("Salary Trends", 2),
    ("Popular Job Titles", 3),
]

PRIMARY_COLOR: str = "#667eea"
SECONDARY_COLOR: str = "#764ba2"
TROUGH_COLOR: str = "#9aa5b1"

AXIS_TITLES: Dict[int, Tuple[str, str]] = {
    1: ("Month", "Number of Job Postings"),
    2: ("Time", "Average Salary (USD)"),
    3: ("Number of Jobs", "Job Title"),
}

CHART_HEIGHT: int = 400
