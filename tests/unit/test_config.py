"""Tests for tracker config — env-driven settings."""

from __future__ import annotations

from pathlib import Path

from build_tracker.config import TrackerConfig


class TestTrackerConfig:
    def test_defaults(self):
        config = TrackerConfig()
        assert config.environment == "development"
        assert config.log_level == "INFO"
        assert config.default_size_key == "gzip"
        assert config.artifact_filters == []

    def test_is_production_false_by_default(self):
        assert TrackerConfig().is_production is False

    def test_is_production_when_set(self):
        assert TrackerConfig(environment="production").is_production is True

    def test_default_builds_dir(self):
        assert TrackerConfig().builds_dir == Path("builds")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("BUILD_TRACKER_DEFAULT_SIZE_KEY", "stat")
        monkeypatch.setenv("BUILD_TRACKER_BUILDS_DIR", "/data/builds")
        config = TrackerConfig()
        assert config.default_size_key == "stat"
        assert config.builds_dir == Path("/data/builds")

    def test_filters_from_env(self, monkeypatch):
        monkeypatch.setenv("BUILD_TRACKER_ARTIFACT_FILTERS", '["^vendor", "\\\\.map$"]')
        assert TrackerConfig().artifact_filters == ["^vendor", "\\.map$"]
