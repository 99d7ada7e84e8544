"""Derived result models that make up a WrappedSummary"""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Persona(str, Enum):
    """Listening persona derived from the peak hour"""
    EARLY_BIRD = "Early Bird"
    AFTERNOON_LISTENER = "Afternoon Listener"
    EVENING_VIBES = "Evening Vibes"
    NIGHT_OWL = "Night Owl"


class NoMatchReason(str, Enum):
    """Why no taste twin was reported"""
    NO_USER_DATA = "NO_USER_DATA"
    NO_FOLLOWED_ACCOUNTS = "NO_FOLLOWED_ACCOUNTS"
    NO_QUALIFYING_OVERLAP = "NO_QUALIFYING_OVERLAP"


class GenreStat(BaseModel):
    """Aggregate numbers for one canonical genre"""
    genre: str
    track_count: int = Field(ge=0)
    listening_ms: int = Field(ge=0)
    listening_hours: float = Field(ge=0)
    share_percentage: float = Field(ge=0, le=100)


class GenreAnalysis(BaseModel):
    """Genre discovery and distribution for the whole corpus"""
    has_data: bool = False
    discovery_count: int = 0
    top_by_count: List[GenreStat] = Field(default_factory=list)
    top_by_time: List[GenreStat] = Field(default_factory=list)
    distribution: Dict[str, float] = Field(default_factory=dict, description="Genre -> share of genre-track assignments")
    top_genres: List[str] = Field(default_factory=list, description="Short list of genre keys by listening time")


class HourBucket(BaseModel):
    hour: int = Field(ge=0, le=23)
    label: str
    play_count: int = 0
    listening_ms: int = 0


class DayBucket(BaseModel):
    day: str
    label: str
    play_count: int = 0
    listening_ms: int = 0


class ListeningPattern(BaseModel):
    """
    When the account listens.

    With has_data False every peak/persona field is None and the
    distributions are empty.
    """
    has_data: bool = False
    total_plays: int = 0
    peak_hour: Optional[int] = Field(None, ge=0, le=23)
    peak_hour_label: Optional[str] = None
    peak_day: Optional[str] = None
    peak_day_label: Optional[str] = None
    persona: Optional[Persona] = None
    hour_distribution: List[HourBucket] = Field(default_factory=list)
    day_distribution: List[DayBucket] = Field(default_factory=list)


class TrendsetterResult(BaseModel):
    """Early adoption score and badge"""
    score: float = Field(0.0, ge=0)
    badge: str
    description: str
    visionary_tracks: int = 0
    early_adopter_tracks: int = 0


class RepostResult(BaseModel):
    """Repost amplification outcome and badge"""
    reposted_tracks: int = 0
    trending_tracks: int = 0
    percentage: float = Field(0.0, ge=0, le=100)
    badge: str
    description: str


class DoppelgangerMatch(BaseModel):
    """The followed account with the most similar taste"""
    account_id: str
    display_name: str
    avatar_url: Optional[str] = None
    similarity: float = Field(ge=0, le=1)
    similarity_percentage: int = Field(ge=0, le=100)
    shared_tracks: int = 0
    shared_artists: int = 0
    shared_genres: int = 0


class DoppelgangerResult(BaseModel):
    """Either a match or the reason none was found"""
    found: bool = False
    match: Optional[DoppelgangerMatch] = None
    reason: Optional[NoMatchReason] = None
    total_compared: int = 0


class ActivityStats(BaseModel):
    """Totals over the activity log"""
    total_plays: int = 0
    total_listening_ms: int = 0
    total_listening_hours: float = 0.0
    likes_given: int = 0
    reposts: int = 0
    shares: int = 0
    books_you_could_have_read: int = 0


class RankedArtist(BaseModel):
    name: str
    listening_hours: float
    track_count: int


class RankedTrack(BaseModel):
    track_id: str
    title: str
    artist: str
    playback_count: int = 0
    reposts_count: int = 0


class LikedArtist(BaseModel):
    name: str
    liked_tracks: int


class PeakYear(BaseModel):
    """Release year most represented among liked tracks"""
    year: int
    like_count: int = Field(ge=1)


class Highlights(BaseModel):
    """Top lists shown on the summary cards"""
    top_artists: List[RankedArtist] = Field(default_factory=list)
    top_tracks: List[RankedTrack] = Field(default_factory=list)
    top_reposted_tracks: List[RankedTrack] = Field(default_factory=list)
    top_liked_artists: List[LikedArtist] = Field(default_factory=list)
    peak_year: Optional[PeakYear] = None


class SkippedComputation(BaseModel):
    """A sub-result omitted because optional upstream data was missing"""
    component: str
    field: str
    message: str


class WrappedSummary(BaseModel):
    """
    Composite year-in-review result for one account.

    Numeric fields and enumerated labels only; optional sub-results are
    None when their inputs were unavailable (see skipped).
    """
    account_id: str
    version: str
    genre_discovery_count: int = 0
    genres: GenreAnalysis = Field(default_factory=GenreAnalysis)
    listening: ListeningPattern = Field(default_factory=ListeningPattern)
    underground_support_percentage: Optional[float] = Field(None, ge=0, le=100)
    trendsetter: Optional[TrendsetterResult] = None
    reposts: Optional[RepostResult] = None
    doppelganger: Optional[DoppelgangerMatch] = None
    doppelganger_reason: Optional[NoMatchReason] = None
    stats: Optional[ActivityStats] = None
    highlights: Optional[Highlights] = None
    skipped: List[SkippedComputation] = Field(default_factory=list)
