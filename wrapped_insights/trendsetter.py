"""Early adoption scoring ("The Trendsetter")"""
import logging
import math
from datetime import timedelta
from typing import Iterable, Optional, Sequence

from wrapped_insights.activity import first_play_by_track
from wrapped_insights.badges import BadgeLadder
from wrapped_insights.config import TRENDSETTER_SIGNALS, TrendsetterConfig
from wrapped_insights.models.snapshot import ActivityEvent, Track
from wrapped_insights.models.summary import TrendsetterResult

logger = logging.getLogger(__name__)


class TrendsetterScorer:
    """Scores how early the account found tracks, weighted by how big they got"""

    def __init__(self, config: Optional[TrendsetterConfig] = None):
        self.config = config or TrendsetterConfig()
        self.ladder = BadgeLadder(
            self.config.tiers,
            self.config.default_badge,
            self.config.default_description,
            signals=TRENDSETTER_SIGNALS
        )

    def popularity_weight(self, playback_count: int) -> float:
        """
        Points for one visionary track.

        log:    visionary_points * log10(1 + playback_count)
        linear: visionary_points * playback_count / breakout_play_count

        Both are non-decreasing in playback_count.
        """
        plays = max(0, playback_count)
        if self.config.popularity_curve == "linear":
            return self.config.visionary_points * plays / self.config.breakout_play_count
        return self.config.visionary_points * math.log10(1 + plays)

    def score(self, tracks: Sequence[Track], events: Iterable[ActivityEvent]) -> TrendsetterResult:
        """
        Classify each played track by its first play and score the result.

        A track is an early adopter pick when first played within
        early_adopter_days of release, and a visionary pick when first played
        within visionary_days and its playback count is above the breakout
        threshold. The two are counted independently. Tracks without a
        release timestamp, or first played before it, do not qualify.
        """
        first_plays = first_play_by_track(events)
        by_id = {track.track_id: track for track in tracks}
        early_window = timedelta(days=self.config.early_adopter_days)
        visionary_window = timedelta(days=self.config.visionary_days)

        visionary = 0
        early = 0
        total = 0.0
        # Sorted so float accumulation order never depends on dict order
        for track_id in sorted(first_plays):
            track = by_id.get(track_id)
            if track is None or track.created_at is None:
                continue
            delay = first_plays[track_id] - track.created_at
            if delay < timedelta(0):
                logger.debug(f"Track {track_id} first played before its release timestamp, ignoring")
                continue
            if delay <= early_window:
                early += 1
                total += self.config.early_adopter_points
            if delay <= visionary_window and track.playback_count > self.config.breakout_play_count:
                visionary += 1
                total += self.popularity_weight(track.playback_count)

        total = round(total, 2)
        badge = self.ladder.resolve({
            "visionary_tracks": visionary,
            "early_adopter_tracks": early,
            "score": total
        })
        logger.debug(f"Trendsetter: score={total} visionary={visionary} early={early} badge={badge.name}")
        return TrendsetterResult(
            score=total,
            badge=badge.name,
            description=badge.description,
            visionary_tracks=visionary,
            early_adopter_tracks=early
        )
