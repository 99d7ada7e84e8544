"""Domain models for one account's point-in-time input snapshot"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class ActivityKind(str, Enum):
    """Kinds of tracked activity"""
    PLAY = "PLAY"
    LIKE = "LIKE"
    REPOST = "REPOST"
    SHARE = "SHARE"


@dataclass(frozen=True)
class ArtistRef:
    """Owning artist of a track"""
    artist_id: str
    name: str
    follower_count: Optional[int] = None  # None when upstream did not report it


@dataclass(frozen=True)
class Track:
    """Track as fetched from upstream; never mutated"""
    track_id: str
    title: str
    artist: ArtistRef
    duration_ms: int = 0
    genre: Optional[str] = None
    genre_family: Optional[str] = None
    tag_list: Optional[str] = None
    playback_count: int = 0
    likes_count: int = 0
    reposts_count: int = 0
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ActivityEvent:
    """One entry of the append-only activity log"""
    user_id: str
    track_id: str
    kind: ActivityKind
    timestamp: datetime
    play_duration_ms: Optional[int] = None  # PLAY only


@dataclass(frozen=True)
class FollowedAccountSnapshot:
    """Liked-music fingerprint of an account the user follows"""
    account_id: str
    display_name: str
    avatar_url: Optional[str] = None
    track_ids: FrozenSet[str] = frozenset()
    artist_names: FrozenSet[str] = frozenset()
    genres: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class WrappedSnapshot:
    """Complete input package for one account"""
    account_id: str
    tracks: Tuple[Track, ...] = ()
    events: Tuple[ActivityEvent, ...] = ()
    followings: Tuple[FollowedAccountSnapshot, ...] = ()
    captured_at: Optional[datetime] = None
    data_version: Optional[str] = None
