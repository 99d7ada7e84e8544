"""Assembles the year-in-review summary from the individual analyzers"""
import logging
from typing import Callable, List, Optional, TypeVar

from wrapped_insights.activity import listening_time_by_track, summarize_activity
from wrapped_insights.config import EngineConfig
from wrapped_insights.doppelganger import DoppelgangerMatcher
from wrapped_insights.errors import MissingOptionalFieldError
from wrapped_insights.genre_analysis import GenreAnalyzer
from wrapped_insights.highlights import build_highlights
from wrapped_insights.listening_patterns import ListeningPatternAnalyzer
from wrapped_insights.models.snapshot import WrappedSnapshot
from wrapped_insights.models.summary import SkippedComputation, WrappedSummary
from wrapped_insights.reposts import RepostScorer
from wrapped_insights.trendsetter import TrendsetterScorer
from wrapped_insights.underground import UndergroundSupportCalculator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WrappedAggregator:
    """Runs every analyzer over one snapshot and composes a WrappedSummary"""

    def __init__(self, config: Optional[EngineConfig] = None, version: str = "1"):
        """Build all analyzers up front so a bad tier table fails here, not mid-report"""
        self.config = config or EngineConfig()
        self.version = version
        self.genre_analyzer = GenreAnalyzer(self.config.genres)
        self.pattern_analyzer = ListeningPatternAnalyzer()
        self.underground = UndergroundSupportCalculator(self.config.underground)
        self.trendsetter = TrendsetterScorer(self.config.trendsetter)
        self.reposts = RepostScorer(self.config.reposts)
        self.matcher = DoppelgangerMatcher(self.config.doppelganger)

    def _optional(self, name: str, compute: Callable[[], T], skipped: List[SkippedComputation]) -> Optional[T]:
        """Run one sub-computation, recording it as skipped when upstream data is missing"""
        try:
            return compute()
        except MissingOptionalFieldError as e:
            logger.warning(f"Skipping {name}: {e}")
            skipped.append(SkippedComputation(component=e.component, field=e.field, message=str(e)))
            return None

    def aggregate(self, snapshot: WrappedSnapshot) -> WrappedSummary:
        """Compute the full summary; partial results are normal, only bad configuration raises"""
        logger.info(f"Building wrapped summary for account {snapshot.account_id}")
        tracks = list(snapshot.tracks)
        events = [e for e in snapshot.events if e.user_id == snapshot.account_id]
        if len(events) < len(snapshot.events):
            logger.warning(f"Ignoring {len(snapshot.events) - len(events)} events owned by other accounts")

        listening_ms = listening_time_by_track(tracks, events)
        skipped: List[SkippedComputation] = []

        genres = self.genre_analyzer.analyze(tracks, listening_ms)
        listening = self.pattern_analyzer.analyze(events)
        underground = self._optional("underground support", lambda: self.underground.calculate(tracks, listening_ms), skipped)
        trendsetter = self._optional("trendsetter score", lambda: self.trendsetter.score(tracks, events), skipped)
        reposts = self._optional("repost score", lambda: self.reposts.score(tracks, events, as_of=snapshot.captured_at), skipped)
        doppelganger = self._optional("doppelganger", lambda: self.matcher.find(tracks, snapshot.followings), skipped)
        stats = self._optional("activity stats", lambda: summarize_activity(events, self.config.stats), skipped)
        highlights = self._optional("highlights", lambda: build_highlights(tracks, listening_ms, self.config.stats, events), skipped)

        summary = WrappedSummary(
            account_id=snapshot.account_id,
            version=self.version,
            genre_discovery_count=genres.discovery_count,
            genres=genres,
            listening=listening,
            underground_support_percentage=underground,
            trendsetter=trendsetter,
            reposts=reposts,
            doppelganger=doppelganger.match if doppelganger else None,
            doppelganger_reason=doppelganger.reason if doppelganger else None,
            stats=stats,
            highlights=highlights,
            skipped=skipped
        )
        logger.info(f"Wrapped summary ready for {snapshot.account_id} "
                    f"({genres.discovery_count} genres, {len(skipped)} skipped sections)")
        return summary
