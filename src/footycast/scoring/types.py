"""
Value types consumed and produced by the scoring model.

All types are frozen dataclasses: they are built fresh for every evaluation
and never carry identity. Inputs validate their ranges on construction and
raise `InvalidInputError` rather than silently clamping.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Tuple

from footycast.scoring.exceptions import InvalidInputError


def check_range(
    owner: str,
    name: str,
    value: Any,
    low: float = 0.0,
    high: float = math.inf,
) -> None:
    """
    Ensure `value` is a finite real number within [low, high].

    Raises
    ------
    InvalidInputError
        If the value is not a real number (bools excluded), is NaN/inf, or is
        out of range.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(
            f"{owner}.{name} must be a number, got {type(value).__name__}"
        )
    if not math.isfinite(value):
        raise InvalidInputError(f"{owner}.{name} must be finite, got {value}")
    if value < low or value > high:
        bounds = f"[{low:g}, {high:g}]" if math.isfinite(high) else f">= {low:g}"
        raise InvalidInputError(f"{owner}.{name} must be {bounds}, got {value}")


@dataclass(frozen=True)
class TeamProfile:
    """
    Statistical profile of one team.

    attack, defense and form are indices on a 0-100 scale; the goal counts
    are historical totals over the profiled window.
    """

    attack: float
    defense: float
    form: float
    goals_scored: float = 0
    goals_conceded: float = 0
    late_goals_scored: float = 0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in ("attack", "defense", "form"):
            check_range("TeamProfile", name, getattr(self, name), 0, 100)
        for name in ("goals_scored", "goals_conceded", "late_goals_scored"):
            check_range("TeamProfile", name, getattr(self, name))


@dataclass(frozen=True)
class HeadToHeadRecord:
    """Historical results between the two teams, from the home side's view."""

    total_matches: int = 0
    home_wins: int = 0
    away_wins: int = 0
    draws: int = 0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in ("total_matches", "home_wins", "away_wins", "draws"):
            check_range("HeadToHeadRecord", name, getattr(self, name))
        decided = self.home_wins + self.away_wins + self.draws
        if decided > self.total_matches:
            raise InvalidInputError(
                "HeadToHeadRecord outcomes exceed total_matches: "
                f"{decided} > {self.total_matches}"
            )


@dataclass(frozen=True)
class WinnerProbability:
    """1X2 probabilities in integer percent; always sums to 100."""

    home: int
    draw: int
    away: int

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.home, self.draw, self.away)


@dataclass(frozen=True)
class ExpectedGoals:
    home: float
    away: float
    total: float


@dataclass(frozen=True)
class StrongMarket:
    """A market whose probability crossed the confidence threshold."""

    market_name: str
    probability: int


@dataclass(frozen=True)
class MatchPrediction:
    """
    Output of one model evaluation.

    Attributes
    ----------
    winner_probability : WinnerProbability
        Home/draw/away in integer percent, summing to exactly 100.
    btts_probability : int
        Both-teams-to-score probability, in [10, 95].
    late_goal_probability : int
        Probability of a goal in the final phase of the match, in [5, 80].
    expected_goals : ExpectedGoals
        Expected goals per side and in total (one decimal place).
    strong_markets : tuple of StrongMarket
        Shortlisted markets in rule evaluation order, unique by name.
    """

    winner_probability: WinnerProbability
    btts_probability: int
    late_goal_probability: int
    expected_goals: ExpectedGoals
    strong_markets: Tuple[StrongMarket, ...] = field(default_factory=tuple)

    def market_names(self) -> List[str]:
        return [m.market_name for m in self.strong_markets]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict representation used by the store and the API."""
        return {
            "winner_probability": {
                "home": self.winner_probability.home,
                "draw": self.winner_probability.draw,
                "away": self.winner_probability.away,
            },
            "btts_probability": self.btts_probability,
            "late_goal_probability": self.late_goal_probability,
            "expected_goals": {
                "home": self.expected_goals.home,
                "away": self.expected_goals.away,
                "total": self.expected_goals.total,
            },
            "strong_markets": [
                {"market_name": m.market_name, "probability": m.probability}
                for m in self.strong_markets
            ],
        }
