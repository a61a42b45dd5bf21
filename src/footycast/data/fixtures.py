"""
Fixture retrieval from third-party football data providers.

Providers are tried in order, and the first one that returns fixtures wins:

1. API-Football, fixtures for the given date.
2. Football-Data.org, matches for the given date (converted to the
   API-Football shape).
3. API-Football, all live fixtures.

Provider errors are logged and the next provider is tried; an empty result
from every provider yields an empty DataFrame.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence

import pandas as pd
import requests

from footycast.config import (
    API_FOOTBALL_KEY,
    API_FOOTBALL_URL,
    FALLBACK_FIXTURE_LIMIT,
    FOOTBALL_DATA_KEY,
    FOOTBALL_DATA_URL,
    REQUEST_TIMEOUT_S,
    TARGET_LEAGUES,
)
from footycast.data.schema import empty_matches_df, validate_matches_df
from footycast.utils.logging_utils import get_logger
from footycast.utils.time_utils import format_local, now_utc, today_local

logger = get_logger(__name__)

RawFixture = Dict[str, Any]

FOOTBALL_DATA_STATUS = {
    "FINISHED": "FT",
    "IN_PLAY": "LIVE",
    "PAUSED": "HT",
}


def _get_json(
    session: requests.Session,
    url: str,
    headers: Dict[str, str],
    params: Dict[str, str],
) -> Any:
    response = session.get(
        url, headers=headers, params=params, timeout=REQUEST_TIMEOUT_S
    )
    response.raise_for_status()
    return response.json()


def fetch_api_football(date: str, session: requests.Session) -> List[RawFixture]:
    """Fetch the fixtures of one day from API-Football."""
    if not API_FOOTBALL_KEY:
        logger.warning("API_FOOTBALL_KEY is not set, skipping API-Football.")
        return []
    data = _get_json(
        session,
        API_FOOTBALL_URL,
        headers={"x-apisports-key": API_FOOTBALL_KEY},
        params={"date": date},
    )
    return list(data.get("response") or [])


def fetch_api_football_live(session: requests.Session) -> List[RawFixture]:
    """Fetch every fixture currently in play from API-Football."""
    if not API_FOOTBALL_KEY:
        return []
    data = _get_json(
        session,
        API_FOOTBALL_URL,
        headers={"x-apisports-key": API_FOOTBALL_KEY},
        params={"live": "all"},
    )
    return list(data.get("response") or [])


def convert_football_data_match(m: Dict[str, Any]) -> RawFixture:
    """
    Convert one Football-Data.org match into the API-Football fixture shape.
    """
    competition = m.get("competition") or {}
    home = m.get("homeTeam") or {}
    away = m.get("awayTeam") or {}
    full_time = (m.get("score") or {}).get("fullTime") or {}

    return {
        "fixture": {
            "id": m.get("id"),
            "date": m.get("utcDate"),
            "venue": {"name": m.get("venue") or "Unknown"},
            "status": {"short": FOOTBALL_DATA_STATUS.get(m.get("status"), "NS")},
        },
        "league": {
            "id": competition.get("id") or 0,
            "name": competition.get("name") or "Unknown",
        },
        "teams": {
            "home": {
                "id": home.get("id") or 0,
                "name": home.get("name"),
                "logo": home.get("crest") or "",
            },
            "away": {
                "id": away.get("id") or 0,
                "name": away.get("name"),
                "logo": away.get("crest") or "",
            },
        },
        "goals": {"home": full_time.get("home"), "away": full_time.get("away")},
    }


def fetch_football_data(date: str, session: requests.Session) -> List[RawFixture]:
    """Fetch the matches of one day from Football-Data.org."""
    if not FOOTBALL_DATA_KEY:
        logger.warning("FOOTBALL_DATA_KEY is not set, skipping Football-Data.")
        return []
    data = _get_json(
        session,
        FOOTBALL_DATA_URL,
        headers={"X-Auth-Token": FOOTBALL_DATA_KEY},
        params={"date": date},
    )
    return [convert_football_data_match(m) for m in data.get("matches") or []]


def fetch_raw_fixtures(
    date: str,
    session: requests.Session,
) -> List[RawFixture]:
    """
    Try each provider in turn and return the first non-empty fixture list.
    """
    providers: List[tuple[str, Callable[[], List[RawFixture]]]] = [
        ("API-Football", lambda: fetch_api_football(date, session)),
        ("Football-Data", lambda: fetch_football_data(date, session)),
        ("API-Football live", lambda: fetch_api_football_live(session)),
    ]

    for name, fetch in providers:
        logger.info("Fetching fixtures from %s...", name)
        try:
            fixtures = fetch()
        except (requests.RequestException, ValueError) as exc:
            logger.error("%s error: %s", name, exc)
            continue
        if fixtures:
            logger.info("%s: %d fixtures found", name, len(fixtures))
            return fixtures
        logger.warning("No fixtures returned from %s", name)

    logger.error("No fixtures found from any provider.")
    return []


def _fixture_to_row(item: RawFixture, updated_at: pd.Timestamp) -> Dict[str, Any]:
    fixture = item.get("fixture") or {}
    league = item.get("league") or {}
    teams = item.get("teams") or {}
    goals = item.get("goals") or {}
    home = teams.get("home") or {}
    away = teams.get("away") or {}

    return {
        "match_id": str(fixture.get("id")),
        "league_id": league.get("id") or 0,
        "league_name": league.get("name") or "Unknown League",
        "home_team": home.get("name"),
        "away_team": away.get("name"),
        "home_logo": home.get("logo") or "",
        "away_logo": away.get("logo") or "",
        "match_date": fixture.get("date"),
        "match_time_local": format_local(fixture.get("date")),
        "status": (fixture.get("status") or {}).get("short") or "NS",
        "home_score": goals.get("home") if goals.get("home") is not None else 0,
        "away_score": goals.get("away") if goals.get("away") is not None else 0,
        # fixture endpoints carry no goal minutes
        "home_late_goals": None,
        "away_late_goals": None,
        "venue": (fixture.get("venue") or {}).get("name") or "Unknown",
        "updated_at": updated_at,
    }


def normalize_fixtures(
    raw: Sequence[RawFixture],
    target_leagues: Optional[Sequence[int]] = None,
    fallback_limit: int = FALLBACK_FIXTURE_LIMIT,
) -> pd.DataFrame:
    """
    Turn provider fixtures into rows of the stored matches schema.

    Fixtures missing a team name are skipped. Only target leagues are kept;
    if none of them play, the first `fallback_limit` fixtures are kept
    instead.

    Parameters
    ----------
    raw : sequence of dict
        Fixtures in the API-Football shape.
    target_leagues : sequence of int | None
        League ids to keep. If None, uses TARGET_LEAGUES from config; an
        empty sequence keeps everything.
    fallback_limit : int
        Number of fixtures kept when no target league matches.

    Returns
    -------
    pandas.DataFrame
        Validated matches DataFrame.
    """
    if target_leagues is None:
        target_leagues = TARGET_LEAGUES

    usable = []
    for item in raw:
        teams = item.get("teams") or {}
        if not (teams.get("home") or {}).get("name") or not (
            teams.get("away") or {}
        ).get("name"):
            logger.warning("Skipping fixture with missing team names")
            continue
        usable.append(item)

    if target_leagues:
        wanted = set(target_leagues)
        selected = [
            f for f in usable if (f.get("league") or {}).get("id") in wanted
        ]
        if not selected:
            selected = usable[:fallback_limit]
    else:
        selected = usable

    if not selected:
        return empty_matches_df()

    updated_at = now_utc()
    df = pd.DataFrame([_fixture_to_row(f, updated_at) for f in selected])
    return validate_matches_df(df)


def fetch_fixtures(
    date: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> pd.DataFrame:
    """
    Fetch and normalize the fixtures of one day.

    Parameters
    ----------
    date : str | None
        Date as YYYY-MM-DD. If None, today's date in the display timezone.
    session : requests.Session | None
        HTTP session to use; a new one is created (and closed) if None.

    Returns
    -------
    pandas.DataFrame
        Validated matches DataFrame (possibly empty).
    """
    if date is None:
        date = today_local()
    logger.info("Fetching fixtures for %s", date)

    own_session = session is None
    session = session if session is not None else requests.Session()
    try:
        raw = fetch_raw_fixtures(date, session)
    finally:
        if own_session:
            session.close()

    df = normalize_fixtures(raw)
    logger.info("Normalized %d fixtures out of %d fetched.", len(df), len(raw))
    return df
