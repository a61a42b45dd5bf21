"""
Probability-scoring model for FootyCast.

- `types` defines the immutable inputs (TeamProfile, HeadToHeadRecord) and
  the output (MatchPrediction).
- `model` turns two profiles and a head-to-head record into a prediction.
- `exceptions` holds the model's error hierarchy.
"""

from footycast.scoring.exceptions import InvalidInputError, ScoringError
from footycast.scoring.model import (
    DEFAULT_PREDICTION,
    ScoringConfig,
    ScoringModel,
    evaluate,
)
from footycast.scoring.types import (
    ExpectedGoals,
    HeadToHeadRecord,
    MatchPrediction,
    StrongMarket,
    TeamProfile,
    WinnerProbability,
)

__all__ = [
    "DEFAULT_PREDICTION",
    "ExpectedGoals",
    "HeadToHeadRecord",
    "InvalidInputError",
    "MatchPrediction",
    "ScoringConfig",
    "ScoringError",
    "ScoringModel",
    "StrongMarket",
    "TeamProfile",
    "WinnerProbability",
    "evaluate",
]
