"""
Schema and validation utilities for stored fixture data.
"""

from __future__ import annotations

from typing import List

import pandas as pd

from footycast.utils.logging_utils import get_logger

logger = get_logger(__name__)

# Columns of the stored matches table
MATCH_COLUMNS: List[str] = [
    "match_id",
    "league_id",
    "league_name",
    "home_team",
    "away_team",
    "home_logo",
    "away_logo",
    "match_date",
    "match_time_local",
    "status",
    "home_score",
    "away_score",
    "home_late_goals",
    "away_late_goals",
    "venue",
    "updated_at",
]

REQUIRED_COLUMNS: List[str] = ["match_id", "home_team", "away_team", "status"]

_INT_COLUMNS = ["league_id", "home_score", "away_score"]
_OPTIONAL_INT_COLUMNS = ["home_late_goals", "away_late_goals"]
_TEXT_COLUMNS = [
    "league_name",
    "home_logo",
    "away_logo",
    "match_time_local",
    "venue",
]


def empty_matches_df() -> pd.DataFrame:
    """Return an empty DataFrame with the stored matches columns."""
    return pd.DataFrame(columns=MATCH_COLUMNS)


def validate_matches_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Validate and coerce a DataFrame to the stored matches schema.

    Checks:
    - Required columns (id, teams, status) are present.
    - Missing optional columns are added.
    - match_id is a string, dates are UTC datetimes, scores are integers.
    - Rows missing a team name are dropped.
    - Duplicate match_ids keep the last occurrence.

    Parameters
    ----------
    df : pandas.DataFrame
        Matches DataFrame (from the fixture client or the CSV store).

    Returns
    -------
    pandas.DataFrame
        A validated copy with exactly MATCH_COLUMNS.

    Raises
    ------
    ValueError
        If required columns are missing.
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required match columns: {missing}")

    df = df.copy()
    for col in MATCH_COLUMNS:
        if col not in df.columns:
            df[col] = pd.NA

    df["match_id"] = df["match_id"].astype(str)
    # stored rows mix second and microsecond precision
    df["match_date"] = pd.to_datetime(
        df["match_date"], errors="coerce", utc=True, format="ISO8601"
    )
    df["updated_at"] = pd.to_datetime(
        df["updated_at"], errors="coerce", utc=True, format="ISO8601"
    )
    if df["match_date"].isna().any():
        logger.warning("Some rows have invalid 'match_date' values after parsing.")

    for col in _INT_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype(int)
    for col in _OPTIONAL_INT_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    for col in _TEXT_COLUMNS:
        df[col] = df[col].fillna("").astype(str)
    df["status"] = df["status"].fillna("NS").astype(str)

    before = len(df)
    df = df.dropna(subset=["home_team", "away_team"])
    df = df[(df["home_team"] != "") & (df["away_team"] != "")]
    if len(df) < before:
        logger.info("Dropped %d rows with missing team names.", before - len(df))

    before = len(df)
    df = df.drop_duplicates(subset="match_id", keep="last")
    if len(df) < before:
        logger.info("Dropped %d duplicate match rows.", before - len(df))

    return df[MATCH_COLUMNS].reset_index(drop=True)
