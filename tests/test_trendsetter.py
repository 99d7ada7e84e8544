"""Tests for early adoption scoring"""
import math
from datetime import timedelta

import pytest

from wrapped_insights.config import TrendsetterConfig
from wrapped_insights.models.snapshot import ActivityKind
from wrapped_insights.trendsetter import TrendsetterScorer


def test_breakout_track_found_early(make_track, make_event, t0):
    track = make_track("1", playback_count=500_000, created_at=t0)
    scorer = TrendsetterScorer()
    result = scorer.score([track], [make_event("1", at=t0 + timedelta(days=2))])

    assert result.visionary_tracks == 1
    assert result.early_adopter_tracks == 1
    assert result.score == pytest.approx(10 + 10 * math.log10(500_001), abs=0.01)
    assert scorer.ladder.rank_of(result.badge) >= scorer.ladder.rank_of("Trendsetter")


def test_no_plays_gets_default_badge(make_track):
    result = TrendsetterScorer().score([make_track("1")], [])
    assert result.score == 0.0
    assert result.visionary_tracks == 0
    assert result.early_adopter_tracks == 0
    assert result.badge == "Listener"
    assert result.description


def test_windows_are_inclusive(make_track, make_event, t0):
    tracks = [
        make_track("early", playback_count=10, created_at=t0),
        make_track("late", playback_count=10, created_at=t0),
        make_track("vision", playback_count=200_000, created_at=t0),
        make_track("too-late", playback_count=200_000, created_at=t0),
    ]
    events = [
        make_event("early", at=t0 + timedelta(days=7)),
        make_event("late", at=t0 + timedelta(days=7, seconds=1)),
        make_event("vision", at=t0 + timedelta(days=30)),
        make_event("too-late", at=t0 + timedelta(days=30, seconds=1)),
    ]
    result = TrendsetterScorer().score(tracks, events)
    assert result.early_adopter_tracks == 1
    assert result.visionary_tracks == 1


def test_breakout_threshold_is_exclusive(make_track, make_event, t0):
    track = make_track("1", playback_count=100_000, created_at=t0)
    result = TrendsetterScorer().score([track], [make_event("1", at=t0 + timedelta(days=10))])
    assert result.visionary_tracks == 0
    assert result.early_adopter_tracks == 0


def test_only_first_play_counts(make_track, make_event, t0):
    track = make_track("1", playback_count=10, created_at=t0)
    events = [
        make_event("1", at=t0 + timedelta(days=20)),
        make_event("1", at=t0 + timedelta(days=1)),
        make_event("1", at=t0 + timedelta(days=2)),
        make_event("1", kind=ActivityKind.LIKE, at=t0),
    ]
    result = TrendsetterScorer().score([track], events)
    assert result.early_adopter_tracks == 1
    assert result.score == 10.0


def test_unknown_release_or_play_before_release_does_not_qualify(make_track, make_event, t0):
    tracks = [make_track("1", created_at=None), make_track("2", created_at=t0)]
    events = [make_event("1", at=t0), make_event("2", at=t0 - timedelta(hours=1)), make_event("3", at=t0)]
    result = TrendsetterScorer().score(tracks, events)
    assert result.early_adopter_tracks == 0
    assert result.score == 0.0


def test_more_popular_tracks_score_higher(make_track, make_event, t0):
    scorer = TrendsetterScorer()
    scores = []
    for plays in (150_000, 1_000_000, 50_000_000):
        track = make_track("1", playback_count=plays, created_at=t0)
        scores.append(scorer.score([track], [make_event("1", at=t0 + timedelta(days=20))]).score)
    assert scores == sorted(scores)
    assert len(set(scores)) == 3


def test_linear_curve(make_track, make_event, t0):
    scorer = TrendsetterScorer(TrendsetterConfig(popularity_curve="linear"))
    assert scorer.popularity_weight(200_000) == pytest.approx(20.0)
    track = make_track("1", playback_count=300_000, created_at=t0)
    result = scorer.score([track], [make_event("1", at=t0 + timedelta(days=20))])
    assert result.score == 30.0


def test_many_visionary_picks_reach_top_badge(make_track, make_event, t0):
    tracks = [make_track(str(i), playback_count=2_000_000, created_at=t0) for i in range(5)]
    events = [make_event(str(i), at=t0 + timedelta(days=1)) for i in range(5)]
    result = TrendsetterScorer().score(tracks, events)
    assert result.badge == "Visionary"


@pytest.mark.parametrize("curve", ["log", "linear"])
def test_popularity_never_lowers_score_or_badge(make_track, make_event, t0, curve):
    scorer = TrendsetterScorer(TrendsetterConfig(popularity_curve=curve))
    scores = []
    ranks = []
    for plays in (0, 50_000, 100_000, 100_001, 1_000_000, 50_000_000):
        tracks = [make_track(str(i), playback_count=plays, created_at=t0) for i in range(3)]
        events = [make_event(str(i), at=t0 + timedelta(days=2)) for i in range(3)]
        result = scorer.score(tracks, events)
        scores.append(result.score)
        ranks.append(scorer.ladder.rank_of(result.badge))
    assert scores == sorted(scores)
    assert ranks == sorted(ranks)
    # Crossing the breakout threshold upgrades Early Adopter to Trendsetter
    assert ranks[2] < ranks[3]
