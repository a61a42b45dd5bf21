import json

import pandas as pd
import pytest

from footycast.data import store as store_module
from footycast.data.store import matches_to_records

from conftest import make_match


def test_store_starts_empty(store):
    assert store.load_matches().empty
    assert store.load_predictions() == []
    assert store.latest_predictions() == []


def test_upsert_matches_replaces_by_match_id(store, history):
    assert store.upsert_matches(history) == len(history)

    update = pd.DataFrame([make_match(9, "Alpha", "Bravo", 1, 0, "2026-02-01T15:00:00+00:00")])
    store.upsert_matches(update)

    df = store.load_matches()
    assert len(df) == len(history)
    row = df[df["match_id"] == "9"].iloc[0]
    assert row["status"] == "FT"
    assert row["home_score"] == 1


def test_round_trip_keeps_types_and_team_names(store):
    store.upsert_matches(pd.DataFrame([make_match(1, "NA", "Bravo", 2, 1, home_late=1, away_late=0)]))

    df = store.load_matches()
    row = df.iloc[0]
    assert row["home_team"] == "NA"
    assert row["match_id"] == "1"
    assert row["home_late_goals"] == 1
    assert row["match_date"] == pd.Timestamp("2026-01-01T15:00:00", tz="UTC")


def test_finished_and_pending_matches(store, history):
    store.upsert_matches(history)
    store.upsert_matches(
        pd.DataFrame([make_match(10, "Charlie", "Delta", date="2026-01-20T15:00:00+00:00", status="1H")])
    )

    assert len(store.finished_matches()) == 5
    pending = store.pending_matches()
    assert list(pending["match_id"]) == ["10", "9"]
    assert list(store.pending_matches(limit=1)["match_id"]) == ["10"]


def test_matches_between(store, history):
    store.upsert_matches(history)
    df = store.matches_between(
        pd.Timestamp("2026-01-01", tz="UTC"), pd.Timestamp("2026-01-03", tz="UTC")
    )
    assert list(df["match_id"]) == ["1", "4"]


def _record(match_id, updated_at):
    return {"match_id": str(match_id), "prediction": {}, "updated_at": updated_at}


def test_upsert_and_prune_predictions(store):
    store.upsert_predictions(
        [_record(i, f"2026-10-19T10:{i:02d}:00+00:00") for i in range(5)]
    )
    store.upsert_predictions([_record(0, "2026-10-19T11:00:00+00:00")])

    assert len(store.load_predictions()) == 5
    assert store.latest_predictions(1)[0]["match_id"] == "0"

    deleted = store.prune_predictions(keep=3)

    assert deleted == 2
    assert [r["match_id"] for r in store.latest_predictions()] == ["0", "4", "3"]
    assert store.prune_predictions(keep=3) == 0


def test_predictions_for(store):
    store.upsert_predictions([_record(1, "a"), _record(2, "b"), _record(3, "c")])
    found = store.predictions_for(["1", "3"])
    assert sorted(r["match_id"] for r in found) == ["1", "3"]


def test_clear(store, history):
    store.upsert_matches(history)
    store.upsert_predictions([_record(1, "a")])

    store.clear()

    assert store.load_matches().empty
    assert store.load_predictions() == []


def test_matches_to_records_is_json_friendly(history):
    records = matches_to_records(history)

    first = records[0]
    assert first["match_date"] == "2026-01-01T15:00:00+00:00"
    assert first["updated_at"] is None
    assert first["home_late_goals"] is None
    assert isinstance(first["home_score"], int)


def test_round_trip_keeps_mixed_precision_dates(store, history):
    store.upsert_matches(history)
    kickoff = "2026-10-19T03:36:33.760336+00:00"
    store.upsert_matches(pd.DataFrame([make_match(30, "Alpha", "Bravo", date=kickoff, status="NS")]))

    df = store.load_matches()

    assert df["match_date"].notna().all()
    row = df[df["match_id"] == "30"].iloc[0]
    assert row["match_date"] == pd.Timestamp(kickoff)
    assert list(store.pending_matches()["match_id"]) == ["9", "30"]


def test_readers_see_previous_predictions_during_a_rewrite(store, monkeypatch):
    store.upsert_predictions([_record(i, f"2026-10-19T10:{i:02d}:00+00:00") for i in range(6)])
    seen = []
    real_dumps = json.dumps

    def dumps_and_read(record):
        if not seen:
            seen.append(len(store.latest_predictions()))
        return real_dumps(record)

    monkeypatch.setattr(store_module.json, "dumps", dumps_and_read)
    store.upsert_predictions([_record(6, "2026-10-19T11:00:00+00:00")])
    monkeypatch.undo()

    assert seen == [6]
    assert len(store.load_predictions()) == 7
    assert [p.name for p in store.predictions_path.parent.iterdir() if p.suffix == ".tmp"] == []


def test_failed_write_keeps_existing_predictions(store, monkeypatch):
    store.upsert_predictions([_record(1, "a"), _record(2, "b")])

    def broken(record):
        raise OSError("disk full")

    monkeypatch.setattr(store_module.json, "dumps", broken)
    with pytest.raises(OSError):
        store.upsert_predictions([_record(3, "c")])
    monkeypatch.undo()

    assert sorted(r["match_id"] for r in store.load_predictions()) == ["1", "2"]
