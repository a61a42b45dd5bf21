"""
File-backed store for fixtures and predictions.

- Matches live in `matches.csv` (schema in `footycast.data.schema`).
- Predictions live in `predictions.jsonl`, one JSON record per match.

Writes are serialised behind a lock so the scheduler jobs and the API can
share one store instance. Every write goes to a temporary file that then
replaces the old one, so readers never see a half-written file.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import IO, Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from footycast.config import FINISHED_STATUS, MAX_STORED_PREDICTIONS, PENDING_STATUSES
from footycast.data.schema import empty_matches_df, validate_matches_df
from footycast.utils.logging_utils import get_logger
from footycast.utils.paths import get_matches_path, get_predictions_path

logger = get_logger(__name__)

_DATE_COLUMNS = ["match_date", "updated_at"]


def matches_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert a matches DataFrame into JSON-friendly dicts.

    Dates become ISO-8601 strings and missing values become None.
    """
    if df.empty:
        return []
    out = df.copy()
    for col in _DATE_COLUMNS:
        if col in out.columns:
            out[col] = out[col].map(
                lambda ts: None if pd.isna(ts) else pd.Timestamp(ts).isoformat()
            )
    out = out.astype(object).where(out.notna(), None)
    return out.to_dict(orient="records")


def _replace_file(path: Path, write: Callable[[IO[str]], None]) -> None:
    """Write `path` through a sibling temporary file and swap it in atomically."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            write(fh)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class PredictionStore:
    """
    Persistence for matches and predictions.

    Parameters
    ----------
    data_dir : pathlib.Path | str | None
        Directory holding the store files. If None, uses DATA_DIR from config.
    """

    def __init__(self, data_dir: Optional[Path | str] = None) -> None:
        self.matches_path = get_matches_path(data_dir)
        self.predictions_path = get_predictions_path(data_dir)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Matches
    # ------------------------------------------------------------------
    def load_matches(self) -> pd.DataFrame:
        """Load all stored matches (empty DataFrame if none yet)."""
        if not self.matches_path.exists():
            return validate_matches_df(empty_matches_df())
        # team names such as "NA" must not be read as missing
        df = pd.read_csv(
            self.matches_path,
            dtype={"match_id": str},
            keep_default_na=False,
            na_values=[""],
        )
        return validate_matches_df(df)

    def upsert_matches(self, df: pd.DataFrame) -> int:
        """
        Insert or replace matches by match_id.

        Returns
        -------
        int
            Number of matches written.
        """
        if df.empty:
            return 0
        incoming = validate_matches_df(df)

        with self._lock:
            existing = self.load_matches()
            kept = existing[~existing["match_id"].isin(incoming["match_id"])]
            merged = pd.concat([kept, incoming], ignore_index=True)
            merged = merged.sort_values("match_date", na_position="last")
            _replace_file(
                self.matches_path, lambda fh: merged.to_csv(fh, index=False)
            )

        logger.info("Saved %d matches to %s", len(incoming), self.matches_path)
        return len(incoming)

    def finished_matches(self) -> pd.DataFrame:
        """Matches with a final result."""
        df = self.load_matches()
        return df[df["status"] == FINISHED_STATUS].reset_index(drop=True)

    def pending_matches(self, limit: int = 100) -> pd.DataFrame:
        """Upcoming or in-play matches, soonest first."""
        df = self.load_matches()
        df = df[df["status"].isin(PENDING_STATUSES)]
        return df.sort_values("match_date").head(limit).reset_index(drop=True)

    def recent_matches(self, limit: int = 100) -> pd.DataFrame:
        """Stored matches ordered by kick-off time."""
        df = self.load_matches()
        return df.sort_values("match_date").head(limit).reset_index(drop=True)

    def matches_between(
        self,
        start: pd.Timestamp,
        end: pd.Timestamp,
    ) -> pd.DataFrame:
        """Matches kicking off within [start, end] (UTC timestamps)."""
        df = self.load_matches()
        mask = (df["match_date"] >= start) & (df["match_date"] <= end)
        return df[mask].sort_values("match_date").reset_index(drop=True)

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------
    def load_predictions(self) -> List[Dict[str, Any]]:
        """Load all stored prediction records."""
        if not self.predictions_path.exists():
            return []
        records = []
        with self.predictions_path.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if line:
                    records.append(json.loads(line))
        return records

    def _write_predictions(self, records: List[Dict[str, Any]]) -> None:
        def write(fh: IO[str]) -> None:
            for record in records:
                fh.write(json.dumps(record) + "\n")

        _replace_file(self.predictions_path, write)

    def upsert_predictions(self, records: Iterable[Dict[str, Any]]) -> int:
        """Insert or replace prediction records by match_id."""
        incoming = {str(r["match_id"]): r for r in records}
        if not incoming:
            return 0

        with self._lock:
            existing = [
                r for r in self.load_predictions()
                if str(r["match_id"]) not in incoming
            ]
            self._write_predictions(existing + list(incoming.values()))

        return len(incoming)

    def prune_predictions(self, keep: int = MAX_STORED_PREDICTIONS) -> int:
        """
        Keep only the `keep` most recently updated predictions.

        Returns
        -------
        int
            Number of predictions deleted.
        """
        with self._lock:
            records = self.load_predictions()
            if len(records) <= keep:
                return 0
            records.sort(key=lambda r: r.get("updated_at") or "", reverse=True)
            self._write_predictions(records[:keep])

        deleted = len(records) - keep
        logger.info("Deleted %d old predictions (keeping last %d)", deleted, keep)
        return deleted

    def latest_predictions(
        self,
        limit: int = MAX_STORED_PREDICTIONS,
    ) -> List[Dict[str, Any]]:
        """Most recently updated predictions first."""
        records = self.load_predictions()
        records.sort(key=lambda r: r.get("updated_at") or "", reverse=True)
        return records[:limit]

    def predictions_for(self, match_ids: Iterable[str]) -> List[Dict[str, Any]]:
        wanted = {str(m) for m in match_ids}
        return [r for r in self.load_predictions() if str(r["match_id"]) in wanted]

    def clear(self) -> None:
        """Delete every stored match and prediction."""
        with self._lock:
            for path in (self.matches_path, self.predictions_path):
                if path.exists():
                    path.unlink()
        logger.info("Store cleared")
