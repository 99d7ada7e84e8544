"""Share of listening time spent on underground artists"""
import logging
from typing import Mapping, Optional, Sequence

from wrapped_insights.config import UndergroundConfig
from wrapped_insights.errors import MissingOptionalFieldError
from wrapped_insights.models.snapshot import Track

logger = logging.getLogger(__name__)


class UndergroundSupportCalculator:
    """Computes the listening-time percentage going to small artists"""

    def __init__(self, config: Optional[UndergroundConfig] = None):
        self.config = config or UndergroundConfig()

    def calculate(self, tracks: Sequence[Track], listening_ms: Optional[Mapping[str, int]] = None) -> float:
        """
        Percentage (one decimal) of listening time on artists below the
        follower threshold.

        Tracks with an unknown follower count are left out of both totals.
        Returns 0.0 when there is no listening time at all.

        Raises:
            MissingOptionalFieldError: tracks exist but none has a known follower count
        """
        listening_ms = listening_ms or {}
        known = [t for t in tracks if t.artist.follower_count is not None]
        if tracks and not known:
            raise MissingOptionalFieldError(
                "underground", "follower_count",
                f"None of {len(tracks)} tracks has an artist follower count"
            )
        if len(known) < len(tracks):
            logger.warning(f"Skipping {len(tracks) - len(known)} tracks without artist follower count")

        total_ms = 0
        underground_ms = 0
        for track in known:
            track_ms = max(0, listening_ms.get(track.track_id, track.duration_ms))
            total_ms += track_ms
            if track.artist.follower_count < self.config.follower_threshold:
                underground_ms += track_ms

        if total_ms == 0:
            return 0.0
        percentage = round(underground_ms * 100.0 / total_ms, 1)
        logger.debug(f"Underground support: {underground_ms}ms of {total_ms}ms ({percentage}%)")
        return min(100.0, max(0.0, percentage))
