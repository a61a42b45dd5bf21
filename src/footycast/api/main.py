# path: src/footycast/api/main.py
"""
FastAPI app exposing FootyCast fixtures and predictions.

Endpoints:
- GET  /health           -> simple health check
- GET  /api/predictions  -> latest stored predictions
- GET  /api/matches      -> stored fixtures, soonest first
- GET  /api/today        -> today's fixtures (display timezone) + predictions
- POST /api/fetch-now    -> fetch fixtures immediately
- POST /api/clear-db     -> delete every stored match and prediction
- GET  /events           -> server-sent events with the latest snapshot
"""

from __future__ import annotations

import asyncio
import json
import os
from datetime import timedelta
from typing import Any, AsyncIterator, Dict, List

import pandas as pd
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from footycast import __version__
from footycast.config import DISPLAY_TIMEZONE, STREAM_INTERVAL_SECONDS
from footycast.data.store import PredictionStore, matches_to_records
from footycast.jobs.predict_job import fetch_and_store
from footycast.jobs.scheduler import FETCH_JOB_ID, PREDICT_JOB_ID, build_scheduler
from footycast.utils.logging_utils import get_logger
from footycast.utils.time_utils import local_day_bounds, now_local

logger = get_logger(__name__)

app = FastAPI(
    title="FootyCast API",
    version=__version__,
    description="Daily football fixture predictions",
)

# Global state populated at startup
STORE: PredictionStore | None = None
SCHEDULER = None

SNAPSHOT_LIMIT = 100


class ListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Dict[str, Any]]


class TodayResponse(BaseModel):
    success: bool = True
    date: str
    timezone: str
    matches: List[Dict[str, Any]]
    predictions: List[Dict[str, Any]]


class FetchNowResponse(BaseModel):
    success: bool = True
    message: str
    saved: int
    time: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


def get_store() -> PredictionStore:
    """Return the shared store, creating it on first use."""
    global STORE
    if STORE is None:
        STORE = PredictionStore()
    return STORE


def _error_response(exc: Exception) -> JSONResponse:
    logger.error("Request failed: %s", exc)
    return JSONResponse(
        status_code=500, content={"success": False, "error": str(exc)}
    )


def _local_timestamp(fmt: str = "%d %b %Y, %I:%M %p") -> str:
    return now_local().strftime(fmt)


def build_snapshot(store: PredictionStore) -> Dict[str, Any]:
    """Latest predictions and fixtures, as pushed to stream subscribers."""
    predictions = store.latest_predictions(SNAPSHOT_LIMIT)
    matches = matches_to_records(store.recent_matches(SNAPSHOT_LIMIT))
    return {
        "predictions": predictions,
        "matches": matches,
        "timestamp": _local_timestamp("%d %b %Y, %I:%M:%S %p"),
        "count": {"matches": len(matches), "predictions": len(predictions)},
    }


def format_event(payload: Dict[str, Any]) -> str:
    """Encode one server-sent event."""
    return f"data: {json.dumps(payload)}\n\n"


async def event_stream(
    store: PredictionStore,
    interval: float = STREAM_INTERVAL_SECONDS,
) -> AsyncIterator[str]:
    """
    Yield a snapshot immediately and then every `interval` seconds.

    A failed snapshot is sent as an error event; the stream keeps going.
    """
    logger.info("Stream client connected")
    try:
        while True:
            try:
                payload = await run_in_threadpool(build_snapshot, store)
            except (OSError, ValueError) as exc:
                payload = {"error": str(exc)}
            yield format_event(payload)
            await asyncio.sleep(interval)
    finally:
        logger.info("Stream client disconnected")


@app.on_event("startup")
def startup_event() -> None:
    """Start the fetch/predict scheduler unless disabled."""
    global SCHEDULER
    if os.getenv("FOOTYCAST_DISABLE_SCHEDULER"):
        logger.info("Scheduler disabled by FOOTYCAST_DISABLE_SCHEDULER")
        return

    SCHEDULER = build_scheduler(get_store())
    SCHEDULER.start()

    # Initial fetch shortly after startup, then a first prediction pass
    now = pd.Timestamp.now(tz="UTC").to_pydatetime()
    SCHEDULER.modify_job(FETCH_JOB_ID, next_run_time=now + timedelta(seconds=5))
    SCHEDULER.modify_job(PREDICT_JOB_ID, next_run_time=now + timedelta(seconds=25))
    logger.info("Scheduler started")


@app.on_event("shutdown")
def shutdown_event() -> None:
    if SCHEDULER is not None and SCHEDULER.running:
        SCHEDULER.shutdown(wait=False)


@app.get("/health")
def health() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/predictions", response_model=ListResponse)
def list_predictions(store: PredictionStore = Depends(get_store)):
    """Latest stored predictions, most recently updated first."""
    try:
        predictions = store.latest_predictions(SNAPSHOT_LIMIT)
    except (OSError, ValueError) as exc:
        return _error_response(exc)
    return ListResponse(count=len(predictions), data=predictions)


@app.get("/api/matches", response_model=ListResponse)
def list_matches(store: PredictionStore = Depends(get_store)):
    """Stored fixtures ordered by kick-off time."""
    try:
        matches = matches_to_records(store.recent_matches(SNAPSHOT_LIMIT))
    except (OSError, ValueError) as exc:
        return _error_response(exc)
    return ListResponse(count=len(matches), data=matches)


@app.get("/api/today", response_model=TodayResponse)
def today(store: PredictionStore = Depends(get_store)):
    """
    Today's fixtures in the display timezone, with their predictions.

    Response:
        {
          "success": true,
          "date": "19 October 2026",
          "timezone": "Asia/Karachi",
          "matches": [...],
          "predictions": [...]
        }
    """
    try:
        start, end = local_day_bounds()
        df = store.matches_between(start, end)
        predictions = store.predictions_for(df["match_id"])
    except (OSError, ValueError) as exc:
        return _error_response(exc)

    return TodayResponse(
        date=_local_timestamp("%d %B %Y"),
        timezone=DISPLAY_TIMEZONE,
        matches=matches_to_records(df),
        predictions=predictions,
    )


@app.post("/api/fetch-now", response_model=FetchNowResponse)
def fetch_now(store: PredictionStore = Depends(get_store)):
    """Fetch today's fixtures immediately."""
    try:
        saved = fetch_and_store(store)
    except (OSError, ValueError) as exc:
        return _error_response(exc)
    return FetchNowResponse(
        message="Fetch triggered", saved=saved, time=_local_timestamp()
    )


@app.post("/api/clear-db", response_model=MessageResponse)
def clear_db(store: PredictionStore = Depends(get_store)):
    """Delete every stored match and prediction."""
    try:
        store.clear()
    except OSError as exc:
        return _error_response(exc)
    return MessageResponse(
        message="Store cleared. Call /api/fetch-now to get fresh data"
    )


@app.get("/events")
async def events(store: PredictionStore = Depends(get_store)) -> StreamingResponse:
    """Server-sent events stream of the latest predictions and fixtures."""
    return StreamingResponse(
        event_stream(store),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
