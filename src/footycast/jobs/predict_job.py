"""
Fetch and prediction jobs for FootyCast.

Usage (from project root, with the virtualenv activated):

    python -m footycast.jobs.predict_job --fetch --predict

This will:
- Fetch today's fixtures from the providers and save them to the store.
- Score every pending fixture with the scoring model.
- Save the predictions, keeping only the most recent ones.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from footycast.config import MAX_FIXTURES_PER_RUN, MAX_STORED_PREDICTIONS
from footycast.data.fixtures import fetch_fixtures
from footycast.data.store import PredictionStore
from footycast.features.profile_builder import (
    ProfileConfig,
    build_head_to_head,
    build_team_profile,
    sample_size,
)
from footycast.scoring import (
    DEFAULT_PREDICTION,
    MatchPrediction,
    ScoringConfig,
    ScoringError,
    ScoringModel,
)
from footycast.utils.logging_utils import get_logger
from footycast.utils.time_utils import now_utc

logger = get_logger(__name__)

# Matches behind both profiles needed for a 100% confidence score
FULL_CONFIDENCE_SAMPLE: int = 20


def confidence_score(n_matches: int) -> int:
    """Data-availability score: 0 with no history, 100 at 20+ matches."""
    return min(100, int(n_matches * 100 / FULL_CONFIDENCE_SAMPLE + 0.5))


@dataclass
class PredictionRecord:
    """
    A stored prediction: fixture identity, model output and provenance.

    `is_default` marks records where the model fell back to its default
    prediction because a team profile was unavailable or neither team had
    any measurable strength.
    """

    match_id: str
    league: str
    home_team: str
    away_team: str
    match_date: Optional[str]
    match_time_local: str
    prediction: Dict[str, Any]
    confidence_score: int
    is_default: bool
    updated_at: str = field(default_factory=lambda: now_utc().isoformat())

    @classmethod
    def from_prediction(
        cls,
        fixture: pd.Series,
        prediction: MatchPrediction,
        n_matches: int,
        is_default: bool,
    ) -> "PredictionRecord":
        match_date = fixture.get("match_date")
        return cls(
            match_id=str(fixture["match_id"]),
            league=str(fixture.get("league_name", "")),
            home_team=str(fixture["home_team"]),
            away_team=str(fixture["away_team"]),
            match_date=None if pd.isna(match_date) else pd.Timestamp(match_date).isoformat(),
            match_time_local=str(fixture.get("match_time_local", "")),
            prediction=prediction.to_dict(),
            confidence_score=confidence_score(n_matches),
            is_default=is_default,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def predict_fixture(
    fixture: pd.Series,
    history: pd.DataFrame,
    model: ScoringModel,
    profile_config: ProfileConfig | None = None,
) -> PredictionRecord:
    """
    Score one fixture against the stored match history.

    Raises
    ------
    ScoringError
        If the derived inputs are rejected by the model.
    """
    if profile_config is None:
        profile_config = ProfileConfig()

    home_team = fixture["home_team"]
    away_team = fixture["away_team"]

    home = build_team_profile(history, home_team, profile_config)
    away = build_team_profile(history, away_team, profile_config)
    h2h = build_head_to_head(history, home_team, away_team)

    prediction = model.evaluate(home, away, h2h)

    return PredictionRecord.from_prediction(
        fixture,
        prediction,
        n_matches=sample_size(
            history, home_team, away_team, profile_config.recent_form_window
        ),
        is_default=prediction is DEFAULT_PREDICTION,
    )


def fetch_and_store(store: PredictionStore, date: Optional[str] = None) -> int:
    """Fetch the fixtures of `date` (default: today) and save them."""
    logger.info("Starting fixture fetch...")
    df = fetch_fixtures(date)
    if df.empty:
        logger.warning("No fixtures to save.")
        return 0
    saved = store.upsert_matches(df)
    logger.info("Fetch complete. Saved %d matches.", saved)
    return saved


def update_predictions(
    store: PredictionStore,
    config: ScoringConfig | None = None,
    limit: int = MAX_FIXTURES_PER_RUN,
    keep: int = MAX_STORED_PREDICTIONS,
) -> int:
    """
    Score pending fixtures and save their predictions.

    A fixture whose inputs are rejected, or whose scoring fails for any
    other reason, is logged and skipped; the rest of the batch still runs.

    Parameters
    ----------
    store : PredictionStore
        Source of fixtures/history and destination of predictions.
    config : ScoringConfig | None
        Model configuration. If None, uses defaults from config.py.
    limit : int
        Maximum number of fixtures scored in one run.
    keep : int
        Number of predictions kept after pruning.

    Returns
    -------
    int
        Number of predictions written.
    """
    model = ScoringModel(config)
    history = store.load_matches()
    pending = store.pending_matches(limit)
    logger.info("Updating predictions for %d pending matches...", len(pending))

    records: List[Dict[str, Any]] = []
    for _, fixture in pending.iterrows():
        try:
            record = predict_fixture(fixture, history, model)
        except ScoringError as exc:
            logger.error(
                "Prediction error for %s vs %s (match %s): %s",
                fixture["home_team"],
                fixture["away_team"],
                fixture["match_id"],
                exc,
            )
            continue
        except Exception:  # noqa: BLE001
            logger.exception(
                "Unexpected failure scoring match %s, skipping it.",
                fixture["match_id"],
            )
            continue
        records.append(record.to_dict())

    updated = store.upsert_predictions(records)
    store.prune_predictions(keep)
    logger.info("Predictions complete. %d predictions updated.", updated)
    return updated


def main() -> None:
    parser = argparse.ArgumentParser(description="Run FootyCast jobs once.")
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Fetch fixtures from the providers and save them.",
    )
    parser.add_argument(
        "--predict",
        action="store_true",
        help="Score pending fixtures and save the predictions.",
    )
    parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="Fixture date (YYYY-MM-DD). Defaults to today in the display timezone.",
    )
    args = parser.parse_args()

    store = PredictionStore()
    run_all = not args.fetch and not args.predict
    if args.fetch or run_all:
        fetch_and_store(store, args.date)
    if args.predict or run_all:
        update_predictions(store)


if __name__ == "__main__":
    main()
