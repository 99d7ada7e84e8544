"""Top artists and tracks for the summary cards"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from wrapped_insights.activity import ms_to_hours
from wrapped_insights.config import StatsConfig
from wrapped_insights.models.snapshot import ActivityEvent, ActivityKind, Track
from wrapped_insights.models.summary import Highlights, LikedArtist, PeakYear, RankedArtist, RankedTrack


def _ranked_track(track: Track) -> RankedTrack:
    return RankedTrack(
        track_id=track.track_id,
        title=track.title,
        artist=track.artist.name,
        playback_count=track.playback_count,
        reposts_count=track.reposts_count
    )


def liked_tracks(tracks: Sequence[Track], events: Iterable[ActivityEvent]) -> List[Track]:
    """Corpus tracks with at least one LIKE, each once, in corpus order"""
    liked_ids = {e.track_id for e in events if e.kind == ActivityKind.LIKE}
    seen = set()
    liked = []
    for track in tracks:
        if track.track_id in liked_ids and track.track_id not in seen:
            seen.add(track.track_id)
            liked.append(track)
    return liked


def peak_year(liked: Sequence[Track]) -> Optional[PeakYear]:
    """Release year with the most liked tracks; the earlier year wins a tie"""
    counts: Dict[int, int] = {}
    for track in liked:
        if track.created_at is not None:
            counts[track.created_at.year] = counts.get(track.created_at.year, 0) + 1
    if not counts:
        return None
    year = min(counts, key=lambda y: (-counts[y], y))
    return PeakYear(year=year, like_count=counts[year])


def build_highlights(tracks: Sequence[Track], listening_ms: Optional[Mapping[str, int]] = None,
                     config: Optional[StatsConfig] = None,
                     events: Iterable[ActivityEvent] = ()) -> Highlights:
    """
    Top artists by listening time, top tracks by plays and by reposts,
    plus the artists and release year behind the account's likes.
    """
    config = config or StatsConfig()
    listening_ms = listening_ms or {}
    n = config.highlights_top_n

    artist_ms: Dict[str, int] = {}
    artist_tracks: Dict[str, int] = {}
    for track in tracks:
        name = track.artist.name
        if not name:
            continue
        artist_ms[name] = artist_ms.get(name, 0) + listening_ms.get(track.track_id, max(0, track.duration_ms))
        artist_tracks[name] = artist_tracks.get(name, 0) + 1

    liked = liked_tracks(tracks, events)
    liked_by_artist: Dict[str, int] = {}
    for track in liked:
        if track.artist.name:
            liked_by_artist[track.artist.name] = liked_by_artist.get(track.artist.name, 0) + 1

    top_artists = sorted(artist_ms, key=lambda name: (-artist_ms[name], name))[:n]
    top_liked = sorted(liked_by_artist, key=lambda name: (-liked_by_artist[name], name))[:n]
    return Highlights(
        top_artists=[
            RankedArtist(name=name, listening_hours=ms_to_hours(artist_ms[name]), track_count=artist_tracks[name])
            for name in top_artists
        ],
        top_tracks=[_ranked_track(t) for t in sorted(tracks, key=lambda t: (-t.playback_count, t.track_id))[:n]],
        top_reposted_tracks=[_ranked_track(t) for t in sorted(tracks, key=lambda t: (-t.reposts_count, t.track_id))[:n]],
        top_liked_artists=[LikedArtist(name=name, liked_tracks=liked_by_artist[name]) for name in top_liked],
        peak_year=peak_year(liked)
    )
