import pytest

from footycast.features.profile_builder import (
    LONG_VIEW_COLUMNS,
    ProfileConfig,
    build_head_to_head,
    build_team_profile,
    recent_team_matches,
    sample_size,
)
from footycast.scoring import HeadToHeadRecord


def test_recent_team_matches_uses_finished_matches_newest_first(history):
    recent = recent_team_matches(history, "Alpha")

    assert list(recent.columns) == LONG_VIEW_COLUMNS
    # the pending fixture (match 9) is not part of the form
    assert list(recent["match_id"]) == ["3", "2", "1"]
    assert list(recent["result"]) == ["loss", "draw", "win"]
    assert list(recent["points"]) == [0, 1, 3]
    assert list(recent["is_home"]) == [0, 0, 1]


def test_recent_team_matches_respects_window(history):
    recent = recent_team_matches(history, "Alpha", window=2)
    assert list(recent["match_id"]) == ["3", "2"]


def test_build_team_profile(history):
    alpha = build_team_profile(history, "Alpha")

    assert alpha.goals_scored == 4
    assert alpha.goals_conceded == 4
    # 4 points out of 9
    assert alpha.form == pytest.approx(44.44)
    # 4 goals in 3 matches, ceiling of 3 goals per match
    assert alpha.attack == pytest.approx(44.44)
    assert alpha.defense == pytest.approx(55.56)
    # no late goals reported: 20% of goals scored
    assert alpha.late_goals_scored == 1


def test_build_team_profile_uses_reported_late_goals(history):
    delta = build_team_profile(history, "Delta")

    assert delta.goals_scored == 3
    assert delta.late_goals_scored == 2
    assert delta.form == pytest.approx(100.0)


def test_build_team_profile_without_history_is_none(history):
    assert build_team_profile(history, "Zulu") is None


def test_build_team_profile_clips_indices(history):
    cfg = ProfileConfig(attack_goals_ceiling=1.0)
    bravo = build_team_profile(history, "Bravo", cfg)

    # 3 scored and 3 conceded in 2 matches
    assert bravo.attack == 100.0
    assert bravo.defense == 0.0


def test_build_head_to_head_counts_both_venues(history):
    h2h = build_head_to_head(history, "Alpha", "Bravo")
    assert h2h == HeadToHeadRecord(total_matches=2, home_wins=1, away_wins=1, draws=0)

    reverse = build_head_to_head(history, "Bravo", "Alpha")
    assert reverse == HeadToHeadRecord(total_matches=2, home_wins=1, away_wins=1, draws=0)

    draw = build_head_to_head(history, "Alpha", "Charlie")
    assert draw == HeadToHeadRecord(total_matches=1, home_wins=0, away_wins=0, draws=1)


def test_build_head_to_head_without_meetings(history):
    assert build_head_to_head(history, "Alpha", "Delta") == HeadToHeadRecord()


def test_sample_size(history):
    assert sample_size(history, "Alpha", "Bravo") == 5
    assert sample_size(history, "Alpha", "Zulu") == 3
