"""Tests for configuration."""
import logging
import pytest
from pydantic import ValidationError

from project_matching.config import MatchingConfig, Settings
from project_matching.utils.log_setup import setup_logging


class TestSettings:
    """Test cases for Settings."""

    def test_cache_ttl_seconds(self):
        assert Settings(cache_ttl_hours=2).cache_ttl_seconds == 7200

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SCORE_MINIMUM", "0.42")
        monkeypatch.setenv("ANALYSIS_MAX_WORKERS", "8")

        settings = Settings()

        assert settings.score_minimum == 0.42
        assert settings.analysis_max_workers == 8


class TestMatchingConfig:
    """Test cases for MatchingConfig."""

    def test_defaults(self):
        config = MatchingConfig()

        assert config.score_minimum == 0.5
        assert config.recommendation_score_minimum == 0.6
        assert config.collaborator_score_minimum == 0.6
        assert config.max_recommendations == 10
        assert config.complementarity_threshold == 0.3

    def test_from_settings(self):
        config = MatchingConfig.from_settings(Settings(score_minimum=0.3, max_recommendations=4))

        assert config.score_minimum == 0.3
        assert config.max_recommendations == 4

    @pytest.mark.parametrize("field,value", [
        ("score_minimum", 1.5),
        ("max_recommendations", 0),
        ("complementarity_threshold", -0.1),
    ])
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            MatchingConfig(**{field: value})


def test_setup_logging_quiets_provider_loggers():
    setup_logging("debug")

    assert logging.getLogger("openai").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING
