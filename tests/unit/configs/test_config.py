"""
Unit tests for the config module.

Tests for Config class path resolution and config loading.
"""

from pathlib import Path

from hackflow.configs.config import Config


class TestConfigPaths:
    """Tests for Config path attributes."""

    def test_config_dir_is_path(self):
        """CONFIG_DIR should be a Path object."""
        assert isinstance(Config.CONFIG_DIR, Path)

    def test_ingestion_config_exists(self):
        """INGESTION_CONFIG_PATH should point to a shipped file."""
        assert Config.INGESTION_CONFIG_PATH.exists()


class TestIngestionConfig:
    """Tests for values read from ingestion.yaml."""

    def test_default_channels(self):
        channels = Config.get_channels()
        assert len(channels) == 8
        assert channels[0] == "astanahub"
        assert "hackathons_ru" in channels

    def test_channel_override(self):
        assert Config.get_channels(["tce_kz"]) == ["tce_kz"]

    def test_empty_override_falls_back(self):
        assert Config.get_channels([]) == Config.get_channels()

    def test_keywords(self):
        assert Config.get_keywords() == ["хакатон", "hackathon"]

    def test_search_options(self):
        options = Config.get_search_options()
        assert options["query_prefix"] == "Hackathons IT events in Kazakhstan"
        assert options["max_results"] == 5
        assert options["search_depth"] == "advanced"

    def test_returned_lists_are_copies(self):
        Config.get_channels().append("mutated")
        assert "mutated" not in Config.get_channels()
