"""Repost amplification scoring ("Repost King")"""
import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from wrapped_insights.activity import events_of_kind
from wrapped_insights.badges import BadgeLadder
from wrapped_insights.config import REPOST_SIGNALS, RepostConfig
from wrapped_insights.models.snapshot import ActivityEvent, ActivityKind, Track
from wrapped_insights.models.summary import RepostResult

logger = logging.getLogger(__name__)


class RepostScorer:
    """Scores how many of the account's reposts went on to trend"""

    def __init__(self, config: Optional[RepostConfig] = None):
        self.config = config or RepostConfig()
        self.ladder = BadgeLadder(
            self.config.tiers,
            self.config.default_badge,
            self.config.default_description,
            signals=REPOST_SIGNALS
        )

    def score(self, tracks: Sequence[Track], events: Iterable[ActivityEvent],
              as_of: Optional[datetime] = None) -> RepostResult:
        """
        Score reposts made in the trailing window ending at as_of.

        as_of defaults to the latest repost. Each reposted track counts once;
        reposts of tracks missing from the corpus cannot be classified and
        are left out.
        """
        reposts = events_of_kind(events, ActivityKind.REPOST)
        if reposts:
            end = as_of or reposts[-1].timestamp
            start = end - timedelta(days=self.config.window_days)
            reposts = [e for e in reposts if start <= e.timestamp <= end]

        by_id = {track.track_id: track for track in tracks}
        reposted_ids = {e.track_id for e in reposts}
        unknown = reposted_ids - by_id.keys()
        if unknown:
            logger.debug(f"Ignoring {len(unknown)} reposted tracks missing from the corpus")
        reposted = [by_id[track_id] for track_id in sorted(reposted_ids - unknown)]

        trending = sum(1 for track in reposted if track.reposts_count > self.config.trending_repost_count)
        percentage = round(trending * 100.0 / len(reposted), 1) if reposted else 0.0

        badge = self.ladder.resolve({"trending_tracks": trending, "percentage": percentage})
        logger.debug(f"Reposts: {trending}/{len(reposted)} trending ({percentage}%), badge={badge.name}")
        return RepostResult(
            reposted_tracks=len(reposted),
            trending_tracks=trending,
            percentage=percentage,
            badge=badge.name,
            description=badge.description
        )
