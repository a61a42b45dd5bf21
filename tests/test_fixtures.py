import requests

from footycast.data import fixtures
from footycast.data.fixtures import (
    convert_football_data_match,
    fetch_fixtures,
    fetch_raw_fixtures,
    normalize_fixtures,
)
from footycast.data.schema import MATCH_COLUMNS
from footycast.utils.time_utils import format_local


def api_football_fixture(fixture_id, home="Arsenal", away="Chelsea", league_id=39):
    return {
        "fixture": {
            "id": fixture_id,
            "date": "2026-10-19T15:00:00+00:00",
            "venue": {"name": "Emirates Stadium"},
            "status": {"short": "NS"},
        },
        "league": {"id": league_id, "name": "Premier League"},
        "teams": {
            "home": {"id": 42, "name": home, "logo": "home.png"},
            "away": {"id": 49, "name": away, "logo": "away.png"},
        },
        "goals": {"home": None, "away": None},
    }


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    """Replays one outcome per call: a payload dict or an exception."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append((url, params))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return FakeResponse(outcome)


def test_format_local_uses_display_timezone():
    assert format_local("2026-10-19T15:00:00+00:00") == "19 Oct 2026, 08:00 PM"
    assert format_local(None) == ""


def test_normalize_fixtures_keeps_target_leagues():
    raw = [
        api_football_fixture(1),
        api_football_fixture(2, league_id=999),
        api_football_fixture(3, away=None),
    ]

    df = normalize_fixtures(raw, target_leagues=[39])

    assert list(df.columns) == MATCH_COLUMNS
    assert list(df["match_id"]) == ["1"]
    row = df.iloc[0]
    assert row["home_team"] == "Arsenal"
    assert row["status"] == "NS"
    assert row["home_score"] == 0
    assert row["venue"] == "Emirates Stadium"
    assert row["match_time_local"] == "19 Oct 2026, 08:00 PM"


def test_normalize_fixtures_falls_back_when_no_target_league_plays():
    raw = [api_football_fixture(i, league_id=999) for i in range(1, 6)]

    df = normalize_fixtures(raw, target_leagues=[39], fallback_limit=3)

    assert list(df["match_id"]) == ["1", "2", "3"]


def test_normalize_fixtures_empty():
    df = normalize_fixtures([])
    assert df.empty
    assert list(df.columns) == MATCH_COLUMNS


def test_convert_football_data_match():
    converted = convert_football_data_match(
        {
            "id": 77,
            "utcDate": "2026-10-19T18:00:00Z",
            "status": "FINISHED",
            "competition": {"id": 2021, "name": "Premier League"},
            "homeTeam": {"id": 1, "name": "Everton", "crest": "e.png"},
            "awayTeam": {"id": 2, "name": "Fulham"},
            "score": {"fullTime": {"home": 2, "away": 1}},
        }
    )

    assert converted["fixture"]["status"]["short"] == "FT"
    assert converted["teams"]["home"]["name"] == "Everton"
    assert converted["teams"]["away"]["logo"] == ""
    assert converted["goals"] == {"home": 2, "away": 1}
    assert converted["fixture"]["venue"]["name"] == "Unknown"


def test_convert_football_data_status_mapping():
    for status, expected in [("IN_PLAY", "LIVE"), ("PAUSED", "HT"), ("TIMED", "NS")]:
        converted = convert_football_data_match({"id": 1, "status": status})
        assert converted["fixture"]["status"]["short"] == expected


def test_fetch_raw_fixtures_falls_back_to_football_data(monkeypatch):
    monkeypatch.setattr(fixtures, "API_FOOTBALL_KEY", "api-key")
    monkeypatch.setattr(fixtures, "FOOTBALL_DATA_KEY", "fd-key")
    session = FakeSession(
        [
            requests.ConnectionError("provider down"),
            {
                "matches": [
                    {
                        "id": 5,
                        "utcDate": "2026-10-19T18:00:00Z",
                        "status": "TIMED",
                        "homeTeam": {"name": "Everton"},
                        "awayTeam": {"name": "Fulham"},
                    }
                ]
            },
        ]
    )

    raw = fetch_raw_fixtures("2026-10-19", session)

    assert len(raw) == 1
    assert raw[0]["teams"]["home"]["name"] == "Everton"
    assert session.calls[0][1] == {"date": "2026-10-19"}
    assert session.calls[1][1] == {"date": "2026-10-19"}


def test_fetch_raw_fixtures_tries_live_last(monkeypatch):
    monkeypatch.setattr(fixtures, "API_FOOTBALL_KEY", "api-key")
    monkeypatch.setattr(fixtures, "FOOTBALL_DATA_KEY", "fd-key")
    session = FakeSession(
        [
            {"response": []},
            {"matches": []},
            {"response": [api_football_fixture(8)]},
        ]
    )

    raw = fetch_raw_fixtures("2026-10-19", session)

    assert [f["fixture"]["id"] for f in raw] == [8]
    assert session.calls[2][1] == {"live": "all"}


def test_fetch_fixtures_without_keys_returns_empty_frame(monkeypatch):
    monkeypatch.setattr(fixtures, "API_FOOTBALL_KEY", "")
    monkeypatch.setattr(fixtures, "FOOTBALL_DATA_KEY", "")
    session = FakeSession([])

    df = fetch_fixtures("2026-10-19", session=session)

    assert df.empty
    assert session.calls == []


def test_fetch_fixtures_normalizes_provider_payload(monkeypatch):
    monkeypatch.setattr(fixtures, "API_FOOTBALL_KEY", "api-key")
    session = FakeSession([{"response": [api_football_fixture(1), api_football_fixture(2)]}])

    df = fetch_fixtures("2026-10-19", session=session)

    assert list(df["match_id"]) == ["1", "2"]
