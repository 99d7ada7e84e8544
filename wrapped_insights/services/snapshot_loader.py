"""Parsing of exported account data into a WrappedSnapshot"""
import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from wrapped_insights.errors import InsufficientDataError
from wrapped_insights.models.snapshot import (
    ActivityEvent,
    ActivityKind,
    ArtistRef,
    FollowedAccountSnapshot,
    Track,
    WrappedSnapshot,
)

logger = logging.getLogger(__name__)

# SoundCloud's own timestamp format, e.g. "2024/03/01 18:22:05 +0000"
SOUNDCLOUD_DATETIME_FORMAT = "%Y/%m/%d %H:%M:%S %z"


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601, SoundCloud-style or epoch-millisecond value to an aware UTC datetime"""
    if value is None or value == "":
        return None
    try:
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        elif isinstance(value, str):
            try:
                dt = datetime.strptime(value, SOUNDCLOUD_DATETIME_FORMAT)
            except ValueError:
                dt = datetime.fromisoformat(value.replace('Z', '+00:00') if value.endswith('Z') else value)
        else:
            logger.warning(f"Unexpected type for datetime value: {type(value)}")
            return None
        if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, TypeError, OverflowError) as e:
        logger.warning(f"Could not parse datetime value: {value}. Error: {e}")
        return None


def _int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _id(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_track(raw: Dict[str, Any]) -> Optional[Track]:
    """Build a Track from an upstream track object; None when it has no id"""
    track_id = _id(raw.get('id', raw.get('track_id')))
    if not track_id:
        logger.warning(f"Skipping track without id: {raw.get('title')}")
        return None
    user = raw.get('user') if isinstance(raw.get('user'), dict) else {}
    artist = ArtistRef(
        artist_id=_id(user.get('id')),
        name=user.get('username') or user.get('full_name') or "",
        follower_count=_int(user.get('followers_count'), default=None)
    )
    return Track(
        track_id=track_id,
        title=raw.get('title') or "Unknown",
        artist=artist,
        duration_ms=max(0, _int(raw.get('duration', raw.get('duration_ms')))),
        genre=raw.get('genre') or None,
        genre_family=raw.get('genre_family') or None,
        tag_list=raw.get('tag_list') or None,
        playback_count=max(0, _int(raw.get('playback_count'))),
        likes_count=max(0, _int(raw.get('likes_count', raw.get('favoritings_count')))),
        reposts_count=max(0, _int(raw.get('reposts_count'))),
        created_at=parse_datetime(raw.get('created_at', raw.get('release_date')))
    )


def parse_event(raw: Dict[str, Any], default_user_id: str) -> Optional[ActivityEvent]:
    """Build an ActivityEvent; None for unknown kinds or missing timestamps"""
    kind_raw = str(raw.get('activity_type', raw.get('kind', ''))).upper()
    try:
        kind = ActivityKind(kind_raw)
    except ValueError:
        logger.warning(f"Skipping activity with unknown type: {kind_raw!r}")
        return None
    timestamp = parse_datetime(raw.get('created_at', raw.get('timestamp')))
    track_id = _id(raw.get('track_id'))
    if timestamp is None or not track_id:
        logger.warning(f"Skipping incomplete {kind.value} activity: {raw}")
        return None
    duration = _int(raw.get('play_duration_ms'), default=None) if kind == ActivityKind.PLAY else None
    return ActivityEvent(
        user_id=_id(raw.get('user_id', raw.get('soundcloud_user_id'))) or default_user_id,
        track_id=track_id,
        kind=kind,
        timestamp=timestamp,
        play_duration_ms=duration
    )


def parse_following(raw: Dict[str, Any]) -> Optional[FollowedAccountSnapshot]:
    account_id = _id(raw.get('id', raw.get('account_id')))
    if not account_id:
        logger.warning(f"Skipping followed account without id: {raw.get('username')}")
        return None
    return FollowedAccountSnapshot(
        account_id=account_id,
        display_name=raw.get('username') or raw.get('full_name') or "Unknown",
        avatar_url=raw.get('avatar_url') or None,
        track_ids=frozenset(_id(t) for t in raw.get('liked_track_ids', []) if _id(t)),
        artist_names=frozenset(str(a) for a in raw.get('liked_artists', []) if a),
        genres=frozenset(str(g) for g in raw.get('liked_genres', []) if g)
    )


def _parse_all(items: Any, parser, label: str) -> List:
    if not isinstance(items, list):
        if items is not None:
            logger.warning(f"Expected a list of {label}, got {type(items).__name__}")
        return []
    parsed = [parser(item) if isinstance(item, dict) else None for item in items]
    kept = [p for p in parsed if p is not None]
    if len(kept) < len(items):
        logger.warning(f"Dropped {len(items) - len(kept)} malformed {label}")
    return kept


def load_snapshot(payload: Dict[str, Any]) -> WrappedSnapshot:
    """
    Build a snapshot from an exported payload.

    Raises:
        InsufficientDataError: the payload names no account
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Snapshot payload must be an object, got {type(payload).__name__}")
    account_id = _id(payload.get('account_id', payload.get('user_id')))
    if not account_id:
        raise InsufficientDataError("Snapshot has no account id")

    snapshot = WrappedSnapshot(
        account_id=account_id,
        tracks=tuple(_parse_all(payload.get('tracks'), parse_track, "tracks")),
        events=tuple(_parse_all(payload.get('activity'), lambda raw: parse_event(raw, account_id), "activities")),
        followings=tuple(_parse_all(payload.get('followings'), parse_following, "followings")),
        captured_at=parse_datetime(payload.get('captured_at')),
        data_version=_id(payload.get('data_version')) or None
    )
    logger.info(f"Loaded snapshot for {account_id}: {len(snapshot.tracks)} tracks, "
                f"{len(snapshot.events)} activities, {len(snapshot.followings)} followings")
    return snapshot


def load_snapshot_file(path: Union[str, os.PathLike]) -> WrappedSnapshot:
    """Read and parse a snapshot JSON file"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Snapshot file {path} is not valid JSON: {e}")
        raise
    return load_snapshot(payload)
