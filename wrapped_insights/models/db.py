"""SQLAlchemy database models for the wrapped summary cache"""
import datetime

from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class CachedSummary(Base):
    """
    One computed WrappedSummary.
    Keyed by account, computation version and upstream data version.
    """
    __tablename__ = 'cached_summaries'
    __table_args__ = (
        UniqueConstraint('account_id', 'version', 'data_version', name='uq_cached_summary_key'),
    )

    id = Column(Integer, primary_key=True)
    account_id = Column(String, nullable=False, index=True)
    version = Column(String, nullable=False)
    # Empty string when the snapshot carried no data version
    data_version = Column(String, nullable=False, default='')
    payload = Column(JSON, nullable=False)
    computed_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
