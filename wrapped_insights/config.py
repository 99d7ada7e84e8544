"""Engine configuration and environment settings"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wrapped_insights.badges import validate_ladder
from wrapped_insights.errors import ConfigurationError

DEFAULT_BADGE = "Listener"

# Signals each scorer exposes to its badge ladder
TRENDSETTER_SIGNALS = frozenset({"visionary_tracks", "early_adopter_tracks", "score"})
REPOST_SIGNALS = frozenset({"trending_tracks", "percentage"})


class ConfigModel(BaseModel):
    """Base for engine config groups; invalid values raise ConfigurationError"""

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {type(self).__name__}: {e}") from e


class TierConfig(ConfigModel):
    """One rung of a badge ladder, unlocked when any of its gates is met"""
    badge: str = Field(..., min_length=1, description="Badge label")
    description: str = Field("", description="Human-readable description of the badge")
    gates: Dict[str, float] = Field(..., description="Signal name -> minimum value")

    @field_validator("gates")
    @classmethod
    def check_gates(cls, gates: Dict[str, float]) -> Dict[str, float]:
        if not gates:
            raise ValueError("a tier needs at least one gate")
        for signal, minimum in gates.items():
            if minimum < 0:
                raise ValueError(f"gate '{signal}' has a negative minimum ({minimum})")
        return gates


class GenreConfig(ConfigModel):
    """Genre aggregation settings"""
    top_n: int = Field(10, ge=1, description="Length of the top-genre lists")
    dashboard_top_n: int = Field(5, ge=1, description="Length of the short top-genre list")


class UndergroundConfig(ConfigModel):
    """Underground support settings"""
    follower_threshold: int = Field(5000, gt=0, description="Artists below this follower count are underground")


class TrendsetterConfig(ConfigModel):
    """Early adoption scoring settings"""
    early_adopter_days: int = Field(7, ge=0, description="Max days between release and first play")
    visionary_days: int = Field(30, ge=0, description="Max days between release and first play for a visionary pick")
    breakout_play_count: int = Field(100_000, gt=0, description="Playback count a track must exceed to count as a breakout")
    early_adopter_points: float = Field(10.0, ge=0, description="Flat points per early adopter track")
    visionary_points: float = Field(10.0, ge=0, description="Base points per visionary track, scaled by popularity")
    popularity_curve: Literal["log", "linear"] = Field("log", description="How visionary points grow with playback count")
    default_badge: str = DEFAULT_BADGE
    default_description: str = "Keep exploring to discover your trendsetter potential!"
    tiers: List[TierConfig] = Field(default_factory=lambda: [
        TierConfig(badge="Visionary", gates={"visionary_tracks": 5, "score": 500},
                   description="You heard the hits before anyone else. Your ears see the future."),
        TierConfig(badge="Trendsetter", gates={"visionary_tracks": 1, "score": 150},
                   description="You caught a breakout track while it was still fresh."),
        TierConfig(badge="Early Adopter", gates={"early_adopter_tracks": 3, "score": 50},
                   description="New releases land in your queue within days."),
        TierConfig(badge="Explorer", gates={"early_adopter_tracks": 1, "score": 10},
                   description="You are starting to find music before the crowd does."),
    ])

    @model_validator(mode="after")
    def check_ladder(self) -> "TrendsetterConfig":
        if self.visionary_days < self.early_adopter_days:
            raise ValueError("visionary_days must not be shorter than early_adopter_days")
        validate_ladder(self.tiers, self.default_badge, TRENDSETTER_SIGNALS)
        return self


class RepostConfig(ConfigModel):
    """Repost amplification scoring settings"""
    window_days: int = Field(365, gt=0, description="Trailing window of reposts considered")
    trending_repost_count: int = Field(1000, ge=0, description="Repost count a track must exceed to be trending")
    default_badge: str = DEFAULT_BADGE
    default_description: str = "Repost the tracks you believe in and watch them grow."
    tiers: List[TierConfig] = Field(default_factory=lambda: [
        TierConfig(badge="Repost King", gates={"trending_tracks": 10, "percentage": 60},
                   description="Your reposts are a hit factory."),
        TierConfig(badge="Tastemaker", gates={"trending_tracks": 5, "percentage": 40},
                   description="Tracks you share tend to blow up."),
        TierConfig(badge="Amplifier", gates={"trending_tracks": 2, "percentage": 20},
                   description="Your reposts help tracks find their audience."),
        TierConfig(badge="Supporter", gates={"trending_tracks": 1, "percentage": 5},
                   description="You backed a track that went on to trend."),
    ])

    @model_validator(mode="after")
    def check_ladder(self) -> "RepostConfig":
        validate_ladder(self.tiers, self.default_badge, REPOST_SIGNALS)
        return self


class DoppelgangerConfig(ConfigModel):
    """Taste twin matching settings"""
    track_weight: float = Field(0.5, ge=0)
    artist_weight: float = Field(0.3, ge=0)
    genre_weight: float = Field(0.2, ge=0)
    # Shared count at which a dimension scores 0.5
    track_half_saturation: float = Field(3.0, gt=0)
    artist_half_saturation: float = Field(5.0, gt=0)
    genre_half_saturation: float = Field(5.0, gt=0)
    min_shared_tracks: int = Field(1, ge=1, description="Shared tracks that qualify a candidate on their own")
    min_shared_artists: int = Field(2, ge=1, description="Shared artists that qualify a candidate on their own")

    @model_validator(mode="after")
    def check_weights(self) -> "DoppelgangerConfig":
        if self.track_weight + self.artist_weight + self.genre_weight <= 0:
            raise ValueError("at least one similarity weight must be positive")
        return self


class StatsConfig(ConfigModel):
    """Activity stats and highlights settings"""
    hours_per_book: float = Field(6.0, gt=0, description="Listening hours equivalent to reading one book")
    highlights_top_n: int = Field(5, ge=1)


class EngineConfig(ConfigModel):
    """All tunable constants of the engine"""
    genres: GenreConfig = Field(default_factory=GenreConfig)
    underground: UndergroundConfig = Field(default_factory=UndergroundConfig)
    trendsetter: TrendsetterConfig = Field(default_factory=TrendsetterConfig)
    reposts: RepostConfig = Field(default_factory=RepostConfig)
    doppelganger: DoppelgangerConfig = Field(default_factory=DoppelgangerConfig)
    stats: StatsConfig = Field(default_factory=StatsConfig)


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    # Input/Output directories with defaults
    INPUT_DIR: str = Field("/input", description="Directory containing snapshot files")
    OUTPUT_DIR: str = Field("/output", description="Directory for output files")

    # Summary cache
    DATABASE_URL: Optional[str] = Field(None, description="SQLAlchemy URL of the summary cache (in-memory cache when unset)")
    CACHE_TTL_SECONDS: int = Field(3600, ge=0, description="Lifetime of a cached summary, in memory or in the database")
    SUMMARY_VERSION: str = Field("1", description="Computation version, part of every cache key")

    LOG_LEVEL: str = Field("INFO", description="Root log level for the CLI")

    # Nested thresholds, e.g. ENGINE__underground__follower_threshold=10000
    ENGINE: EngineConfig = Field(default_factory=EngineConfig)

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        env_nested_delimiter='__',
        case_sensitive=True,
        extra='ignore'
    )


def load_engine_config(overrides: Optional[Dict[str, Any]] = None) -> EngineConfig:
    """Build an EngineConfig from a (possibly partial) mapping of overrides"""
    try:
        return EngineConfig.model_validate(overrides or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid engine configuration: {e}") from e


def load_settings(**overrides: Any) -> Settings:
    """Load settings from the environment, failing with ConfigurationError"""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
