# src/hackflow/configs/config.py
import yaml
from pathlib import Path
from functools import lru_cache
from typing import List, Optional


class Config:
    """
    Static ingestion configuration for HackFlow (channels, keywords, search).
    """

    # This points to src/hackflow/configs/
    CONFIG_DIR = Path(__file__).parent.resolve()

    INGESTION_CONFIG_PATH = CONFIG_DIR / "ingestion.yaml"

    @classmethod
    @lru_cache
    def load_ingestion_config(cls) -> dict:
        """Loads the YAML configuration for the ingestion pipeline."""
        if not cls.INGESTION_CONFIG_PATH.exists():
            raise FileNotFoundError(f"Missing config at {cls.INGESTION_CONFIG_PATH}")

        with open(cls.INGESTION_CONFIG_PATH, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def get_channels(cls, override: Optional[List[str]] = None) -> List[str]:
        """Returns the channels to poll, preferring an explicit override."""
        if override:
            return list(override)
        return list(cls.load_ingestion_config().get("channels", []))

    @classmethod
    def get_keywords(cls) -> List[str]:
        """Returns the topical keywords used by the relevance gate."""
        return list(cls.load_ingestion_config().get("keywords", []))

    @classmethod
    def get_search_options(cls) -> dict:
        """Returns the web-search options for the ad-hoc pipeline."""
        return dict(cls.load_ingestion_config().get("search", {}))
