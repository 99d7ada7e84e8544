"""Tests for repost amplification scoring"""
from datetime import timedelta

from wrapped_insights.config import RepostConfig
from wrapped_insights.models.snapshot import ActivityKind
from wrapped_insights.reposts import RepostScorer


def _repost(make_event, track_id, at):
    return make_event(track_id, kind=ActivityKind.REPOST, at=at)


def test_three_of_ten_trending(make_track, make_event, t0):
    tracks = [make_track(str(i), reposts_count=5000 if i < 3 else 10) for i in range(10)]
    events = [_repost(make_event, str(i), t0) for i in range(10)]
    result = RepostScorer().score(tracks, events)

    assert result.reposted_tracks == 10
    assert result.trending_tracks == 3
    assert result.percentage == 30.0
    assert result.badge == "Amplifier"


def test_no_reposts(make_track, make_event, t0):
    result = RepostScorer().score([make_track("1")], [make_event("1", at=t0)])
    assert result.reposted_tracks == 0
    assert result.percentage == 0.0
    assert result.badge == "Listener"


def test_trending_threshold_is_exclusive(make_track, make_event, t0):
    tracks = [make_track("1", reposts_count=1000), make_track("2", reposts_count=1001)]
    events = [_repost(make_event, "1", t0), _repost(make_event, "2", t0)]
    result = RepostScorer().score(tracks, events)
    assert result.trending_tracks == 1
    assert result.percentage == 50.0


def test_repeated_reposts_count_once(make_track, make_event, t0):
    tracks = [make_track("1", reposts_count=5000)]
    events = [_repost(make_event, "1", t0), _repost(make_event, "1", t0 + timedelta(days=1))]
    result = RepostScorer().score(tracks, events)
    assert result.reposted_tracks == 1
    assert result.percentage == 100.0


def test_window_ends_at_as_of(make_track, make_event, t0):
    tracks = [make_track("old", reposts_count=5000), make_track("new", reposts_count=1)]
    events = [
        _repost(make_event, "old", t0 - timedelta(days=400)),
        _repost(make_event, "new", t0),
        _repost(make_event, "new", t0 + timedelta(days=30)),
    ]
    result = RepostScorer().score(tracks, events, as_of=t0 + timedelta(days=1))
    assert result.reposted_tracks == 1
    assert result.trending_tracks == 0


def test_window_defaults_to_latest_repost(make_track, make_event, t0):
    tracks = [make_track("old", reposts_count=5000), make_track("new", reposts_count=5000)]
    events = [_repost(make_event, "old", t0), _repost(make_event, "new", t0 + timedelta(days=366))]
    result = RepostScorer().score(tracks, events)
    assert result.reposted_tracks == 1
    result = RepostScorer(RepostConfig(window_days=400)).score(tracks, events)
    assert result.reposted_tracks == 2


def test_reposts_outside_corpus_are_ignored(make_track, make_event, t0):
    tracks = [make_track("1", reposts_count=5000)]
    events = [_repost(make_event, "1", t0), _repost(make_event, "missing", t0)]
    result = RepostScorer().score(tracks, events)
    assert result.reposted_tracks == 1
    assert result.percentage == 100.0
