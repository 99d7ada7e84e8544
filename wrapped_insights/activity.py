"""Shared views over the activity log and totals derived from it"""
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from wrapped_insights.config import StatsConfig
from wrapped_insights.models.snapshot import ActivityEvent, ActivityKind, Track
from wrapped_insights.models.summary import ActivityStats

logger = logging.getLogger(__name__)

MS_PER_HOUR = 1000 * 60 * 60


def events_of_kind(events: Iterable[ActivityEvent], kind: ActivityKind) -> List[ActivityEvent]:
    """Events of one kind, ordered by timestamp"""
    return sorted((e for e in events if e.kind == kind), key=lambda e: e.timestamp)


def listening_time_by_track(tracks: Iterable[Track], events: Iterable[ActivityEvent]) -> Dict[str, int]:
    """
    Listening time in ms per corpus track.

    Sums tracked PLAY durations for a track; a track with no tracked
    duration is estimated as a single full play of its duration.
    """
    played: Dict[str, int] = {}
    for event in events:
        if event.kind == ActivityKind.PLAY and event.play_duration_ms is not None:
            played[event.track_id] = played.get(event.track_id, 0) + max(0, event.play_duration_ms)

    listening = {}
    for track in tracks:
        if track.track_id in played:
            listening[track.track_id] = played[track.track_id]
        else:
            listening[track.track_id] = max(0, track.duration_ms)
    return listening


def first_play_by_track(events: Iterable[ActivityEvent]) -> Dict[str, datetime]:
    """Timestamp of the earliest PLAY of each track"""
    first: Dict[str, datetime] = {}
    for event in events:
        if event.kind != ActivityKind.PLAY:
            continue
        seen = first.get(event.track_id)
        if seen is None or event.timestamp < seen:
            first[event.track_id] = event.timestamp
    return first


def ms_to_hours(ms: int) -> float:
    return round(ms / MS_PER_HOUR, 2)


def summarize_activity(events: Iterable[ActivityEvent], config: Optional[StatsConfig] = None) -> ActivityStats:
    """Count plays, likes, reposts and shares and total the tracked listening time"""
    config = config or StatsConfig()
    counts = {kind: 0 for kind in ActivityKind}
    total_ms = 0
    for event in events:
        counts[event.kind] += 1
        if event.kind == ActivityKind.PLAY and event.play_duration_ms:
            total_ms += max(0, event.play_duration_ms)

    hours = total_ms / MS_PER_HOUR
    stats = ActivityStats(
        total_plays=counts[ActivityKind.PLAY],
        total_listening_ms=total_ms,
        total_listening_hours=round(hours, 2),
        likes_given=counts[ActivityKind.LIKE],
        reposts=counts[ActivityKind.REPOST],
        shares=counts[ActivityKind.SHARE],
        books_you_could_have_read=int(hours / config.hours_per_book)
    )
    logger.debug(f"Activity stats: {stats}")
    return stats
