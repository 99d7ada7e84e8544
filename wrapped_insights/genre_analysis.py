"""Genre aggregation over an account's track corpus"""
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from wrapped_insights.activity import ms_to_hours
from wrapped_insights.config import GenreConfig
from wrapped_insights.genres import track_genres
from wrapped_insights.models.snapshot import Track
from wrapped_insights.models.summary import GenreAnalysis, GenreStat

logger = logging.getLogger(__name__)


class GenreAnalyzer:
    """Aggregates tracks into per-genre counts, listening time and shares"""

    def __init__(self, config: Optional[GenreConfig] = None):
        self.config = config or GenreConfig()

    def analyze(self, tracks: Sequence[Track], listening_ms: Optional[Mapping[str, int]] = None) -> GenreAnalysis:
        """
        Analyze genres across the corpus.

        Each track counts once towards every genre it carries, and its full
        listening time is credited to each of those genres. listening_ms maps
        track id to listening time; tracks missing from it fall back to one
        play of their duration.

        Shares are taken against the total number of genre-track assignments,
        so they always add up to 100.
        """
        listening_ms = listening_ms or {}
        counts: Dict[str, int] = {}
        times: Dict[str, int] = {}

        for track in tracks:
            genres = track_genres(track)
            if not genres:
                continue
            track_ms = listening_ms.get(track.track_id, max(0, track.duration_ms))
            for genre in genres:
                counts[genre] = counts.get(genre, 0) + 1
                times[genre] = times.get(genre, 0) + track_ms

        if not counts:
            logger.debug(f"No genres found across {len(tracks)} tracks")
            return GenreAnalysis()

        total_assignments = sum(counts.values())
        shares = {genre: count * 100.0 / total_assignments for genre, count in counts.items()}
        stats = {
            genre: GenreStat(
                genre=genre,
                track_count=counts[genre],
                listening_ms=times[genre],
                listening_hours=ms_to_hours(times[genre]),
                share_percentage=round(shares[genre], 2)
            )
            for genre in counts
        }

        by_count = self._rank(stats.values(), key=lambda s: s.track_count)
        by_time = self._rank(stats.values(), key=lambda s: s.listening_ms)

        analysis = GenreAnalysis(
            has_data=True,
            discovery_count=len(counts),
            top_by_count=by_count[:self.config.top_n],
            top_by_time=by_time[:self.config.top_n],
            distribution=dict(sorted(shares.items())),
            top_genres=[s.genre for s in by_time[:self.config.dashboard_top_n]]
        )
        logger.debug(f"Discovered {analysis.discovery_count} genres across {len(tracks)} tracks")
        return analysis

    @staticmethod
    def _rank(stats, key) -> List[GenreStat]:
        # Descending by key, ties by genre name for a stable order
        return sorted(stats, key=lambda s: (-key(s), s.genre))
