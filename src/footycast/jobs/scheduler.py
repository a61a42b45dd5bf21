"""
Interval scheduler for the fetch and prediction jobs.

Each job runs at most once at a time; missed runs are coalesced into one.
"""

from __future__ import annotations

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from footycast.config import FETCH_INTERVAL_MINUTES, PREDICT_INTERVAL_MINUTES
from footycast.data.store import PredictionStore
from footycast.jobs.predict_job import fetch_and_store, update_predictions
from footycast.utils.logging_utils import get_logger

logger = get_logger(__name__)

FETCH_JOB_ID = "fetch_fixtures"
PREDICT_JOB_ID = "update_predictions"


def _run_fetch(store: PredictionStore) -> None:
    logger.info("Scheduled run: fetching fixtures")
    try:
        fetch_and_store(store)
    except Exception as exc:  # noqa: BLE001
        logger.error("Fixture fetch failed: %s", exc)


def _run_predict(store: PredictionStore) -> None:
    logger.info("Scheduled run: updating predictions")
    try:
        update_predictions(store)
    except Exception as exc:  # noqa: BLE001
        logger.error("Prediction update failed: %s", exc)


def build_scheduler(
    store: PredictionStore,
    fetch_minutes: int = FETCH_INTERVAL_MINUTES,
    predict_minutes: int = PREDICT_INTERVAL_MINUTES,
) -> BackgroundScheduler:
    """
    Create (but do not start) a scheduler with the fetch and predict jobs.

    Parameters
    ----------
    store : PredictionStore
        Store shared by both jobs.
    fetch_minutes, predict_minutes : int
        Job intervals in minutes.

    Returns
    -------
    BackgroundScheduler
        Scheduler with both jobs registered.
    """
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        _run_fetch,
        IntervalTrigger(minutes=fetch_minutes),
        args=[store],
        id=FETCH_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.add_job(
        _run_predict,
        IntervalTrigger(minutes=predict_minutes),
        args=[store],
        id=PREDICT_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    logger.info(
        "Scheduler configured: fetch every %d min, predict every %d min",
        fetch_minutes,
        predict_minutes,
    )
    return scheduler
