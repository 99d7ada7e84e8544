"""Tests for engine configuration and settings loading"""
import pytest

from wrapped_insights.config import (
    DoppelgangerConfig,
    EngineConfig,
    RepostConfig,
    Settings,
    TierConfig,
    TrendsetterConfig,
    load_engine_config,
    load_settings,
)
from wrapped_insights.errors import ConfigurationError


def test_defaults():
    config = load_engine_config()
    assert config == EngineConfig()
    assert config.underground.follower_threshold == 5000
    assert config.trendsetter.early_adopter_days == 7
    assert config.trendsetter.visionary_days == 30
    assert config.reposts.window_days == 365
    assert [t.badge for t in config.reposts.tiers] == ["Repost King", "Tastemaker", "Amplifier", "Supporter"]


def test_partial_overrides_keep_other_defaults():
    config = load_engine_config({"trendsetter": {"popularity_curve": "linear"}, "genres": {"top_n": 3}})
    assert config.trendsetter.popularity_curve == "linear"
    assert config.trendsetter.breakout_play_count == 100_000
    assert config.genres.top_n == 3


@pytest.mark.parametrize("overrides", [
    {"underground": {"follower_threshold": 0}},
    {"trendsetter": {"popularity_curve": "cubic"}},
    {"trendsetter": {"tiers": [{"badge": "Top", "gates": {}}]}},
    {"trendsetter": {"tiers": [{"badge": "Top", "gates": {"score": -1}}]}},
    {"reposts": {"tiers": [{"badge": "Top", "gates": {"plays": 1}}]}},
    {"doppelganger": {"track_weight": 0, "artist_weight": 0, "genre_weight": 0}},
])
def test_invalid_overrides_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError):
        load_engine_config(overrides)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        load_engine_config({"stats": {"hours_per_book": 0}})


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("INPUT_DIR", "/data/in")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("ENGINE__underground__follower_threshold", "10000")
    settings = load_settings()
    assert isinstance(settings, Settings)
    assert settings.INPUT_DIR == "/data/in"
    assert settings.CACHE_TTL_SECONDS == 60
    assert settings.ENGINE.underground.follower_threshold == 10000


def test_invalid_settings_raise_configuration_error(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_SECONDS", "-5")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_explicit_overrides():
    settings = load_settings(INPUT_DIR="/tmp/in", DATABASE_URL="sqlite://")
    assert settings.INPUT_DIR == "/tmp/in"
    assert settings.DATABASE_URL == "sqlite://"


@pytest.mark.parametrize("build", [
    lambda: TrendsetterConfig(tiers=[TierConfig(badge="Low", gates={"score": 1}),
                                     TierConfig(badge="High", gates={"score": 5})]),
    lambda: RepostConfig(trending_repost_count=-1),
    lambda: DoppelgangerConfig(track_weight=0, artist_weight=0, genre_weight=0),
    lambda: TierConfig(badge="Empty", gates={}),
    lambda: EngineConfig(underground={"follower_threshold": -1}),
])
def test_direct_construction_raises_configuration_error(build):
    with pytest.raises(ConfigurationError):
        build()
