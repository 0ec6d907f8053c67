"""Data manager for the one-shot job-postings dataset fetch.

This module resolves where the dataset lives, reads it once into a
DataFrame of raw strings and keeps that frame in memory for the lifetime
of the process.  The source may be a local CSV path or an HTTP(S) URL;
the ``JOBS_DATASET_SOURCE`` environment variable overrides the default.
Cell values are left as strings: typing happens in
:mod:`jobs_dashboard.normalize`.
"""

import logging
import os
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import List

import pandas as pd
import requests

from .config import DATASET_SOURCE, DATASET_SOURCE_ENV, DEFAULT_SEP, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


def resolve_source() -> str:
    """Select the dataset location.

    The lookup order is:

    1. The ``JOBS_DATASET_SOURCE`` environment variable, if set.
    2. ``config.DATASET_SOURCE`` next to the repository root.
    3. ``config.DATASET_SOURCE`` relative to the working directory.
    """
    env = os.getenv(DATASET_SOURCE_ENV)
    if env:
        if env.lower().startswith(("http://", "https://")):
            return env
        # Expand relative or user paths to absolute
        return str(Path(env).expanduser().resolve())

    repo_copy = Path(__file__).resolve().parent.parent / DATASET_SOURCE
    if repo_copy.exists():
        return str(repo_copy)
    return DATASET_SOURCE


def _open_source(source: str | Path) -> BytesIO | Path:
    """Return a file-like object (for URLs) or Path (for local files)."""
    source_str = str(source)
    if source_str.lower().startswith(("http://", "https://")):
        response = requests.get(source_str, timeout=30)
        response.raise_for_status()
        return BytesIO(response.content)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found at {path}")
    return path


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")


def read_dataset(source: str | Path, sep: str = DEFAULT_SEP) -> pd.DataFrame:
    """Read the postings CSV with every cell kept as a raw string.

    Parameters
    ----------
    source : str or Path
        Local path or HTTP(S) URL of the CSV.
    sep : str, optional
        Column delimiter; defaults to ``","``.

    Returns
    -------
    pd.DataFrame
        One row per posting; empty cells are empty strings.
    """
    df = pd.read_csv(
        _open_source(source), sep=sep, dtype=str, keep_default_na=False
    )
    df.columns = [str(col).strip() for col in df.columns]
    ensure_columns(df, REQUIRED_COLUMNS)
    return df


@lru_cache(maxsize=1)
def _read_cached(source: str) -> pd.DataFrame:
    return read_dataset(source)


def load_dataset(
    source: str | Path | None = None, force_reload: bool = False
) -> pd.DataFrame:
    """
    Load the dataset, reusing the in-memory copy when available.

    Parameters
    ----------
    source : str or Path, optional
        Dataset location.  Defaults to :func:`resolve_source`.
    force_reload : bool, optional
        If ``True``, drop the in-memory copy and read the source again.

    Returns
    -------
    pd.DataFrame
        A copy of the raw postings frame.
    """
    resolved = str(source) if source is not None else resolve_source()
    if force_reload:
        _read_cached.cache_clear()
    logger.info("Loading job postings from %s", resolved)
    df = _read_cached(resolved)
    logger.info("Loaded %d rows", len(df))
    return df.copy()
