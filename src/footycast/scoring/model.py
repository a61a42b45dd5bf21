"""
Probability-scoring model for FootyCast.

Turns two team profiles and their head-to-head record into a match
prediction:

1. Raw strengths from attack/defense/form, with a home-advantage multiplier.
2. Head-to-head bias on the home/away shares, clamped to [5, 95].
3. Normalization of home/draw/away to integers summing to exactly 100.
4. Both-teams-to-score from attack vs. opponent defense on both sides.
5. Late-goal probability from historical late goals.
6. Expected goals per side.
7. Strong-market shortlist.

The model is pure: no I/O, no randomness, no module-level mutable state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from footycast.config import HOME_ADVANTAGE, STRONG_MARKET_THRESHOLD
from footycast.scoring.exceptions import InvalidInputError
from footycast.scoring.types import (
    ExpectedGoals,
    HeadToHeadRecord,
    MatchPrediction,
    StrongMarket,
    TeamProfile,
    WinnerProbability,
    check_range,
)
from footycast.utils.logging_utils import get_logger

logger = get_logger(__name__)

# Weights of attack / defense / form in a team's raw strength
STRENGTH_WEIGHTS: Tuple[float, float, float] = (0.4, 0.3, 0.3)

# Points of home share added per unit of head-to-head home win rate
H2H_WEIGHT: float = 10.0

# Bounds (percent) applied before presenting any probability
OUTCOME_BOUNDS: Tuple[float, float] = (5, 95)
BTTS_BOUNDS: Tuple[float, float] = (10, 95)
LATE_GOAL_BOUNDS: Tuple[float, float] = (5, 80)

# Goals-total ladder: (comparison, line, market name, probability).
# Evaluated top to bottom, first match wins.
GOALS_LADDER: Tuple[Tuple[str, float, str, int], ...] = (
    (">=", 3.5, "Over 3.5 Goals", 85),
    (">=", 2.5, "Over 2.5 Goals", 75),
    ("<=", 1.5, "Under 2.5 Goals", 85),
)

# Returned when an input is missing or the computation cannot proceed.
DEFAULT_PREDICTION = MatchPrediction(
    winner_probability=WinnerProbability(home=33, draw=34, away=33),
    btts_probability=50,
    late_goal_probability=30,
    expected_goals=ExpectedGoals(home=1.2, away=1.1, total=2.3),
    strong_markets=(),
)


@dataclass(frozen=True)
class ScoringConfig:
    """Configuration for the scoring model."""

    home_advantage: float = HOME_ADVANTAGE
    strong_threshold: int = STRONG_MARKET_THRESHOLD

    def __post_init__(self) -> None:
        check_range("ScoringConfig", "home_advantage", self.home_advantage)
        check_range("ScoringConfig", "strong_threshold", self.strong_threshold, 0, 100)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (inputs are >= 0)."""
    return int(math.floor(value + 0.5))


def _round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def team_strength(profile: TeamProfile) -> float:
    """Weighted blend of attack, defense and form."""
    w_attack, w_defense, w_form = STRENGTH_WEIGHTS
    return (
        profile.attack * w_attack
        + profile.defense * w_defense
        + profile.form * w_form
    )


def normalize_to_100(raw: Tuple[float, float, float]) -> Tuple[int, int, int]:
    """
    Scale three non-negative values to integer percentages summing to 100.

    Each scaled value is rounded half-up; the rounding residual is assigned
    to the largest component (first one wins on ties).
    """
    total = sum(raw)
    if total <= 0:
        raise ValueError("Cannot normalize an all-zero distribution")

    rounded = [_round_half_up(v * 100 / total) for v in raw]
    residual = 100 - sum(rounded)
    if residual:
        largest = max(range(len(rounded)), key=lambda i: rounded[i])
        rounded[largest] += residual
    return rounded[0], rounded[1], rounded[2]


class ScoringModel:
    """
    Stateless match scorer.

    Parameters
    ----------
    config : ScoringConfig | None
        Model configuration. If None, uses defaults from config.py.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config if config is not None else ScoringConfig()

    def evaluate(
        self,
        home: Optional[TeamProfile],
        away: Optional[TeamProfile],
        h2h: Optional[HeadToHeadRecord],
    ) -> MatchPrediction:
        """
        Score one fixture.

        Parameters
        ----------
        home, away : TeamProfile | None
            Profiles of the home and away team.
        h2h : HeadToHeadRecord | None
            Head-to-head record, from the home team's perspective.

        Returns
        -------
        MatchPrediction
            The prediction, or DEFAULT_PREDICTION if any input is missing or
            the teams have no measurable strength at all.

        Raises
        ------
        InvalidInputError
            If an input has the wrong type or a field outside its range.
        """
        if home is None or away is None or h2h is None:
            logger.debug("Incomplete input, returning default prediction.")
            return DEFAULT_PREDICTION

        self._validate(home, away, h2h)

        home_strength = team_strength(home) * self.config.home_advantage
        away_strength = team_strength(away)
        if home_strength + away_strength <= 0:
            logger.warning(
                "Both teams have zero strength, returning default prediction."
            )
            return DEFAULT_PREDICTION

        winner = self._winner_probability(home_strength, away_strength, h2h)
        btts = self._btts_probability(home, away)
        late_goal = self._late_goal_probability(home, away)
        xg = self._expected_goals(home, away)

        return MatchPrediction(
            winner_probability=winner,
            btts_probability=btts,
            late_goal_probability=late_goal,
            expected_goals=xg,
            strong_markets=tuple(self._strong_markets(winner, btts, xg)),
        )

    def _validate(
        self,
        home: TeamProfile,
        away: TeamProfile,
        h2h: HeadToHeadRecord,
    ) -> None:
        for label, value, expected in (
            ("home", home, TeamProfile),
            ("away", away, TeamProfile),
            ("h2h", h2h, HeadToHeadRecord),
        ):
            if not isinstance(value, expected):
                raise InvalidInputError(
                    f"{label} must be a {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            value.validate()

    def _winner_probability(
        self,
        home_strength: float,
        away_strength: float,
        h2h: HeadToHeadRecord,
    ) -> WinnerProbability:
        low, high = OUTCOME_BOUNDS
        total_strength = home_strength + away_strength
        h2h_factor = h2h.home_wins / max(h2h.total_matches, 1)

        home_raw = _clamp(
            home_strength / total_strength * 100 + h2h_factor * H2H_WEIGHT,
            low,
            high,
        )
        away_raw = _clamp(
            away_strength / total_strength * 100 - h2h_factor * H2H_WEIGHT,
            low,
            high,
        )
        draw_raw = _clamp(100 - home_raw - away_raw, low, high)

        home_pct, draw_pct, away_pct = normalize_to_100(
            (home_raw, draw_raw, away_raw)
        )
        return WinnerProbability(home=home_pct, draw=draw_pct, away=away_pct)

    @staticmethod
    def _btts_probability(home: TeamProfile, away: TeamProfile) -> int:
        home_scores = home.attack / 100 * (100 - away.defense) / 100
        away_scores = away.attack / 100 * (100 - home.defense) / 100
        raw = (home_scores + away_scores) * 50
        return _round_half_up(_clamp(raw, *BTTS_BOUNDS))

    @staticmethod
    def _late_goal_probability(home: TeamProfile, away: TeamProfile) -> int:
        raw = (home.late_goals_scored / 10 + away.late_goals_scored / 10) * 3
        return _round_half_up(_clamp(raw, *LATE_GOAL_BOUNDS))

    @staticmethod
    def _expected_goals(home: TeamProfile, away: TeamProfile) -> ExpectedGoals:
        # 2.5 vs 2.0: home sides convert more of their attack into goals
        home_xg = _round1(home.attack / 100 * 2.5 + away.defense / 100 * 0.5)
        away_xg = _round1(away.attack / 100 * 2.0 + home.defense / 100 * 0.5)
        return ExpectedGoals(
            home=home_xg, away=away_xg, total=_round1(home_xg + away_xg)
        )

    def _strong_markets(
        self,
        winner: WinnerProbability,
        btts: int,
        xg: ExpectedGoals,
    ) -> List[StrongMarket]:
        strong = self.config.strong_threshold
        markets: List[StrongMarket] = []

        for name, prob in (
            ("Home Win", winner.home),
            ("Away Win", winner.away),
            ("Draw", winner.draw),
        ):
            if prob >= strong:
                markets.append(StrongMarket(name, prob))

        if btts >= strong:
            markets.append(StrongMarket("BTTS Yes", btts))
        elif btts <= 100 - strong:
            markets.append(StrongMarket("BTTS No", 100 - btts))

        for op, line, name, prob in GOALS_LADDER:
            hit = xg.total >= line if op == ">=" else xg.total <= line
            if hit:
                markets.append(StrongMarket(name, prob))
                break

        return markets


def evaluate(
    home: Optional[TeamProfile],
    away: Optional[TeamProfile],
    h2h: Optional[HeadToHeadRecord],
    config: ScoringConfig | None = None,
) -> MatchPrediction:
    """Score one fixture with the given (or default) configuration."""
    return ScoringModel(config).evaluate(home, away, h2h)
