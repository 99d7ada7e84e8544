"""Tests for the batch entry point"""
import json

import pytest

from wrapped_insights.__main__ import main, run
from wrapped_insights.config import load_settings
from wrapped_insights.db import db


@pytest.fixture
def dirs(tmp_path):
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    return input_dir, output_dir


def _snapshot_payload(account_id):
    return {
        "account_id": account_id,
        "data_version": "1",
        "tracks": [{"id": 1, "genre": "Techno", "duration": 60000, "user": {"username": "A", "followers_count": 10}}],
        "activity": [{"activity_type": "PLAY", "track_id": 1, "created_at": "2024-05-01T21:00:00Z"}],
    }


def test_run_writes_results(dirs):
    input_dir, output_dir = dirs
    (input_dir / "a.json").write_text(json.dumps(_snapshot_payload("a")), encoding="utf-8")
    (input_dir / "b.json").write_text(json.dumps({"tracks": []}), encoding="utf-8")
    (input_dir / "c.json").write_text("{oops", encoding="utf-8")

    config = load_settings(INPUT_DIR=str(input_dir), OUTPUT_DIR=str(output_dir), DATABASE_URL=None)
    results = run(config)

    assert len(results["summaries"]) == 1
    assert [e["file"] for e in results["errors"]] == ["b.json", "c.json"]

    written = json.loads((output_dir / "results.json").read_text(encoding="utf-8"))
    summary = written["summaries"][0]
    assert summary["account_id"] == "a"
    assert summary["underground_support_percentage"] == 100.0
    assert summary["listening"]["persona"] == "Evening Vibes"
    assert summary["doppelganger_reason"] == "NO_FOLLOWED_ACCOUNTS"


def test_run_with_database_cache(dirs):
    input_dir, output_dir = dirs
    (input_dir / "a.json").write_text(json.dumps(_snapshot_payload("a")), encoding="utf-8")
    config = load_settings(INPUT_DIR=str(input_dir), OUTPUT_DIR=str(output_dir), DATABASE_URL="sqlite://")
    try:
        first = run(config)
        second = run(config)
    finally:
        db.dispose()
    assert first["summaries"] == second["summaries"]


def test_run_without_input_files(dirs):
    input_dir, output_dir = dirs
    config = load_settings(INPUT_DIR=str(input_dir), OUTPUT_DIR=str(output_dir))
    with pytest.raises(FileNotFoundError):
        run(config)


def test_expired_database_summary_is_recomputed(dirs, tmp_path):
    input_dir, output_dir = dirs
    payload = _snapshot_payload("a")
    del payload["data_version"]
    snapshot_file = input_dir / "a.json"
    snapshot_file.write_text(json.dumps(payload), encoding="utf-8")
    config = load_settings(INPUT_DIR=str(input_dir), OUTPUT_DIR=str(output_dir),
                           DATABASE_URL=f"sqlite:///{tmp_path / 'cache.db'}", CACHE_TTL_SECONDS=0)
    try:
        first = run(config)
        payload["tracks"][0]["genre"] = "Jazz"
        snapshot_file.write_text(json.dumps(payload), encoding="utf-8")
        second = run(config)
    finally:
        db.dispose()
    assert first["summaries"][0].genres.top_genres == ["techno"]
    assert second["summaries"][0].genres.top_genres == ["jazz"]


def test_main_exits_on_invalid_settings(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_SECONDS", "-5")
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 2
