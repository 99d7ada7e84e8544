"""Summary cache backends and the cached summary service"""
import datetime
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from wrapped_insights.models.db import CachedSummary
from wrapped_insights.models.snapshot import WrappedSnapshot
from wrapped_insights.models.summary import WrappedSummary
from wrapped_insights.wrapped import WrappedAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryKey:
    """Cache key: account, computation version and upstream data version"""
    account_id: str
    version: str
    data_version: str = ""


class SummaryCache(Protocol):
    """Anything that can store and return computed summaries"""

    def get(self, key: SummaryKey) -> Optional[WrappedSummary]:
        ...

    def put(self, key: SummaryKey, summary: WrappedSummary) -> None:
        ...


class InMemorySummaryCache:
    """Process-local cache with time-based expiry"""

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[SummaryKey, Tuple[float, WrappedSummary]] = {}

    def get(self, key: SummaryKey) -> Optional[WrappedSummary]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, summary = entry
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            return None
        return summary

    def put(self, key: SummaryKey, summary: WrappedSummary) -> None:
        self._entries[key] = (self._clock(), summary)

    def clear(self) -> None:
        self._entries.clear()


class SqlSummaryCache:
    """Database-backed cache; one row per key, replaced on every put"""

    def __init__(self, session: Session, ttl_seconds: Optional[float] = None):
        self.session = session
        self.ttl_seconds = ttl_seconds

    def _find(self, key: SummaryKey) -> Optional[CachedSummary]:
        return (
            self.session.query(CachedSummary)
            .filter_by(account_id=key.account_id, version=key.version, data_version=key.data_version)
            .first()
        )

    def _expired(self, row: CachedSummary) -> bool:
        if self.ttl_seconds is None:
            return False
        computed_at = row.computed_at
        # SQLite hands back naive datetimes; they were written as UTC
        if computed_at.tzinfo is None:
            computed_at = computed_at.replace(tzinfo=datetime.timezone.utc)
        age = datetime.datetime.now(datetime.timezone.utc) - computed_at
        return age.total_seconds() > self.ttl_seconds

    def get(self, key: SummaryKey) -> Optional[WrappedSummary]:
        try:
            row = self._find(key)
        except SQLAlchemyError as e:
            logger.error(f"Database error reading cached summary for {key.account_id}: {e}")
            self.session.rollback()
            raise
        if row is None or self._expired(row):
            return None
        return WrappedSummary.model_validate(row.payload)

    def put(self, key: SummaryKey, summary: WrappedSummary) -> None:
        try:
            row = self._find(key)
            payload = summary.model_dump(mode="json")
            if row:
                logger.info(f"Updating cached summary for {key.account_id} (version {key.version})")
                row.payload = payload
                row.computed_at = datetime.datetime.now(datetime.timezone.utc)
            else:
                logger.info(f"Creating cached summary for {key.account_id} (version {key.version})")
                self.session.add(CachedSummary(
                    account_id=key.account_id,
                    version=key.version,
                    data_version=key.data_version,
                    payload=payload
                ))
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error storing summary for {key.account_id}: {e}")
            raise


class WrappedService:
    """Serves summaries through an injected cache; the analyzers never see it"""

    def __init__(self, aggregator: WrappedAggregator, cache: Optional[SummaryCache] = None):
        self.aggregator = aggregator
        self.cache = cache

    def key_for(self, snapshot: WrappedSnapshot) -> SummaryKey:
        return SummaryKey(
            account_id=snapshot.account_id,
            version=self.aggregator.version,
            data_version=snapshot.data_version or ""
        )

    def get_summary(self, snapshot: WrappedSnapshot, refresh: bool = False) -> WrappedSummary:
        """Return the cached summary for this snapshot, computing it on a miss"""
        key = self.key_for(snapshot)
        if self.cache is not None and not refresh:
            cached = self.cache.get(key)
            if cached is not None:
                logger.info(f"Cache hit for {key.account_id}")
                return cached

        summary = self.aggregator.aggregate(snapshot)
        if self.cache is not None:
            self.cache.put(key, summary)
        return summary
