"""Shared fixtures: small factories for tracks, events and followed accounts"""
from datetime import datetime, timedelta, timezone

import pytest

from wrapped_insights.models.snapshot import (
    ActivityEvent,
    ActivityKind,
    ArtistRef,
    FollowedAccountSnapshot,
    Track,
    WrappedSnapshot,
)

ACCOUNT_ID = "user-1"
T0 = datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)  # a Monday


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def make_track():
    def _make(track_id, artist="Artist", followers=100, duration_ms=180_000, genre=None,
              genre_family=None, tag_list=None, playback_count=0, reposts_count=0,
              created_at=None, title=None):
        return Track(
            track_id=track_id,
            title=title or f"Track {track_id}",
            artist=ArtistRef(artist_id=f"a-{artist}", name=artist, follower_count=followers),
            duration_ms=duration_ms,
            genre=genre,
            genre_family=genre_family,
            tag_list=tag_list,
            playback_count=playback_count,
            reposts_count=reposts_count,
            created_at=created_at
        )
    return _make


@pytest.fixture
def make_event():
    def _make(track_id, kind=ActivityKind.PLAY, at=T0, duration_ms=None, user_id=ACCOUNT_ID):
        return ActivityEvent(
            user_id=user_id,
            track_id=track_id,
            kind=kind,
            timestamp=at,
            play_duration_ms=duration_ms
        )
    return _make


@pytest.fixture
def make_following():
    def _make(account_id, track_ids=(), artists=(), genres=(), name=None):
        return FollowedAccountSnapshot(
            account_id=account_id,
            display_name=name or account_id,
            avatar_url=f"https://img.example/{account_id}.jpg",
            track_ids=frozenset(track_ids),
            artist_names=frozenset(artists),
            genres=frozenset(genres)
        )
    return _make


@pytest.fixture
def sample_snapshot(make_track, make_event, make_following):
    """A small but complete account: genres, plays, reposts and followings"""
    tracks = (
        make_track("1", artist="Basement Crew", followers=800, genre="Hip-Hop", tag_list="boom bap, lofi",
                   playback_count=500_000, reposts_count=2500, created_at=T0 - timedelta(days=2)),
        make_track("2", artist="Basement Crew", followers=800, genre="hip hop", duration_ms=200_000,
                   playback_count=3_000, reposts_count=40, created_at=T0 - timedelta(days=90)),
        make_track("3", artist="Arena Star", followers=2_000_000, genre="Pop", genre_family="Electronic",
                   playback_count=9_000_000, reposts_count=15_000, created_at=T0 - timedelta(days=400)),
    )
    events = (
        make_event("1", at=T0, duration_ms=170_000),
        make_event("1", at=T0 + timedelta(days=1), duration_ms=180_000),
        make_event("2", at=T0.replace(hour=23), duration_ms=200_000),
        make_event("3", kind=ActivityKind.LIKE, at=T0),
        make_event("1", kind=ActivityKind.REPOST, at=T0 + timedelta(days=3)),
        make_event("2", kind=ActivityKind.REPOST, at=T0 + timedelta(days=4)),
        make_event("3", kind=ActivityKind.SHARE, at=T0),
    )
    followings = (
        make_following("friend-a", track_ids={"1", "2"}, artists={"Basement Crew"}, genres={"Hip Hop"}),
        make_following("friend-b", artists={"Arena Star"}, genres={"pop"}),
    )
    return WrappedSnapshot(
        account_id=ACCOUNT_ID,
        tracks=tracks,
        events=events,
        followings=followings,
        captured_at=T0 + timedelta(days=10),
        data_version="v1"
    )
