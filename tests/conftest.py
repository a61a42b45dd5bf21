import os

import pandas as pd
import pytest

os.environ.setdefault("FOOTYCAST_DISABLE_SCHEDULER", "1")

from footycast.data.schema import validate_matches_df  # noqa: E402
from footycast.data.store import PredictionStore  # noqa: E402


def make_match(
    match_id,
    home,
    away,
    home_score=0,
    away_score=0,
    date="2026-01-01T15:00:00+00:00",
    status="FT",
    home_late=None,
    away_late=None,
    league_id=39,
):
    return {
        "match_id": str(match_id),
        "league_id": league_id,
        "league_name": "Premier League",
        "home_team": home,
        "away_team": away,
        "match_date": date,
        "status": status,
        "home_score": home_score,
        "away_score": away_score,
        "home_late_goals": home_late,
        "away_late_goals": away_late,
    }


@pytest.fixture
def history() -> pd.DataFrame:
    """
    Small match history:

    - Alpha: W 2-0 v Bravo, D 1-1 at Charlie, L 1-3 at Bravo
    - Bravo: L 0-2 at Alpha, W 3-1 v Alpha
    - Delta / Echo: late goals reported
    - one pending Alpha v Bravo fixture
    """
    rows = [
        make_match(1, "Alpha", "Bravo", 2, 0, "2026-01-01T15:00:00+00:00"),
        make_match(2, "Charlie", "Alpha", 1, 1, "2026-01-08T15:00:00+00:00"),
        make_match(3, "Bravo", "Alpha", 3, 1, "2026-01-15T15:00:00+00:00"),
        make_match(4, "Delta", "Echo", 2, 1, "2026-01-02T15:00:00+00:00", home_late=1, away_late=0),
        make_match(5, "Echo", "Delta", 0, 1, "2026-01-09T15:00:00+00:00", home_late=0, away_late=1),
        make_match(9, "Alpha", "Bravo", 0, 0, "2026-02-01T15:00:00+00:00", status="NS"),
    ]
    return validate_matches_df(pd.DataFrame(rows))


@pytest.fixture
def store(tmp_path) -> PredictionStore:
    return PredictionStore(tmp_path / "store")
