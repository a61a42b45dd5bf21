# path: src/footycast/features/profile_builder.py
"""
Team profile and head-to-head builders for FootyCast.

This module turns stored finished matches into the scoring model's inputs:

- Builds a team-centric long view with per-match stats from each team's
  perspective.
- Summarises a team's last N finished matches into a TeamProfile
  (attack / defense / form indices plus goal totals).
- Counts the head-to-head record between the two teams of a fixture.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from footycast.config import (
    ATTACK_GOALS_CEILING,
    FINISHED_STATUS,
    LATE_GOAL_SHARE,
    RECENT_FORM_WINDOW,
)
from footycast.scoring.types import HeadToHeadRecord, TeamProfile
from footycast.utils.logging_utils import get_logger

logger = get_logger(__name__)

LONG_VIEW_COLUMNS = [
    "match_id",
    "match_date",
    "team",
    "opponent",
    "is_home",
    "goals_for",
    "goals_against",
    "late_goals_for",
    "result",
    "points",
]


@dataclass
class ProfileConfig:
    """Configuration for profile building."""

    recent_form_window: int = RECENT_FORM_WINDOW
    attack_goals_ceiling: float = ATTACK_GOALS_CEILING
    late_goal_share: float = LATE_GOAL_SHARE


def _team_rows(matches: pd.DataFrame, team: str) -> pd.DataFrame:
    """
    Rows of one team's finished matches, from that team's perspective.

    One row per match:
    - match_id, match_date, team, opponent, is_home
    - goals_for, goals_against, late_goals_for (NaN if not reported)
    - result (win/draw/loss) and points (3/1/0)
    """
    finished = matches[matches["status"] == FINISHED_STATUS]

    home = finished[finished["home_team"] == team]
    df_home = pd.DataFrame(
        {
            "match_id": home["match_id"],
            "match_date": home["match_date"],
            "team": team,
            "opponent": home["away_team"],
            "is_home": 1,
            "goals_for": home["home_score"],
            "goals_against": home["away_score"],
            "late_goals_for": home["home_late_goals"],
        }
    )

    away = finished[finished["away_team"] == team]
    df_away = pd.DataFrame(
        {
            "match_id": away["match_id"],
            "match_date": away["match_date"],
            "team": team,
            "opponent": away["home_team"],
            "is_home": 0,
            "goals_for": away["away_score"],
            "goals_against": away["home_score"],
            "late_goals_for": away["away_late_goals"],
        }
    )

    df = pd.concat([df_home, df_away], ignore_index=True)
    if df.empty:
        return pd.DataFrame(columns=LONG_VIEW_COLUMNS)

    df["goals_for"] = df["goals_for"].astype(int)
    df["goals_against"] = df["goals_against"].astype(int)
    df["late_goals_for"] = pd.to_numeric(df["late_goals_for"], errors="coerce")
    df["result"] = np.select(
        [df["goals_for"] > df["goals_against"], df["goals_for"] < df["goals_against"]],
        ["win", "loss"],
        default="draw",
    )
    df["points"] = df["result"].map({"win": 3, "draw": 1, "loss": 0})
    return df[LONG_VIEW_COLUMNS]


def recent_team_matches(
    matches: pd.DataFrame,
    team: str,
    window: int = RECENT_FORM_WINDOW,
) -> pd.DataFrame:
    """
    Return a team's last `window` finished matches, newest first.

    Parameters
    ----------
    matches : pandas.DataFrame
        Stored matches (any status; only finished ones are used).
    team : str
        Team name.
    window : int
        Maximum number of matches to return.

    Returns
    -------
    pandas.DataFrame
        Long-format rows with LONG_VIEW_COLUMNS.
    """
    df = _team_rows(matches, team)
    df = df.sort_values(["match_date", "match_id"], ascending=False)
    return df.head(window).reset_index(drop=True)


def build_team_profile(
    matches: pd.DataFrame,
    team: str,
    config: ProfileConfig | None = None,
) -> TeamProfile | None:
    """
    Summarise a team's recent finished matches into a TeamProfile.

    - form: share of available points won (0-100).
    - attack: average goals scored relative to the goals ceiling (0-100).
    - defense: 100 minus average goals conceded relative to the ceiling.
    - late_goals_scored: reported late goals, or an estimate from
      goals_scored when the provider did not report them.

    Returns
    -------
    TeamProfile | None
        None when the team has no finished matches.
    """
    if config is None:
        config = ProfileConfig()

    recent = recent_team_matches(matches, team, config.recent_form_window)
    n = len(recent)
    if n == 0:
        logger.info("No finished matches for %s, profile unavailable.", team)
        return None

    goals_scored = int(recent["goals_for"].sum())
    goals_conceded = int(recent["goals_against"].sum())
    ceiling = config.attack_goals_ceiling

    form = float(recent["points"].sum()) / (3 * n) * 100
    attack = float(np.clip(goals_scored / n / ceiling * 100, 0, 100))
    defense = float(np.clip((1 - goals_conceded / n / ceiling) * 100, 0, 100))

    reported_late = recent["late_goals_for"].dropna()
    if len(reported_late) == n:
        late_goals = int(reported_late.sum())
    else:
        late_goals = int(round(goals_scored * config.late_goal_share))

    return TeamProfile(
        attack=round(attack, 2),
        defense=round(defense, 2),
        form=round(form, 2),
        goals_scored=goals_scored,
        goals_conceded=goals_conceded,
        late_goals_scored=late_goals,
    )


def build_head_to_head(
    matches: pd.DataFrame,
    home_team: str,
    away_team: str,
) -> HeadToHeadRecord:
    """
    Count finished meetings between two teams, at either venue.

    `home_wins` counts wins by the fixture's home team and `away_wins` wins
    by the fixture's away team, regardless of where the meeting was played.
    """
    finished = matches[matches["status"] == FINISHED_STATUS]
    same = (finished["home_team"] == home_team) & (finished["away_team"] == away_team)
    reverse = (finished["home_team"] == away_team) & (finished["away_team"] == home_team)
    meetings = finished[same | reverse]

    if meetings.empty:
        return HeadToHeadRecord()

    fixture_home_goals = np.where(
        meetings["home_team"] == home_team,
        meetings["home_score"],
        meetings["away_score"],
    )
    fixture_away_goals = np.where(
        meetings["home_team"] == home_team,
        meetings["away_score"],
        meetings["home_score"],
    )

    return HeadToHeadRecord(
        total_matches=int(len(meetings)),
        home_wins=int((fixture_home_goals > fixture_away_goals).sum()),
        away_wins=int((fixture_home_goals < fixture_away_goals).sum()),
        draws=int((fixture_home_goals == fixture_away_goals).sum()),
    )


def sample_size(
    matches: pd.DataFrame,
    home_team: str,
    away_team: str,
    window: int = RECENT_FORM_WINDOW,
) -> int:
    """Number of recent matches behind both teams' profiles."""
    return len(recent_team_matches(matches, home_team, window)) + len(
        recent_team_matches(matches, away_team, window)
    )
