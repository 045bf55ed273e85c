"""Tracker configuration management."""

from functools import lru_cache
from pathlib import Path

from .schemas import TrackerConfig
from .utils import load_json

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'tracker_config.json'


@lru_cache(maxsize=1)
def get_config() -> TrackerConfig:
    """
    Load tracker configuration from data/tracker_config.json.

    Configuration is cached after first load.

    Returns:
        TrackerConfig object with validated settings

    Raises:
        FileNotFoundError: If tracker_config.json doesn't exist
        ValueError: If config file has invalid structure

    Example:
        from matchtrack.config import get_config
        config = get_config()
        print(f"Match threshold: {config.match_threshold}")
    """
    return load_json(DEFAULT_CONFIG_PATH, schema=TrackerConfig)


def matcher_settings() -> dict[str, float]:
    """Keyword arguments for match_player / reconcile."""
    config = get_config()
    return {
        'threshold': config.match_threshold,
        'substring_similarity': config.substring_similarity,
    }


def handicap_settings() -> dict[str, float]:
    """Keyword arguments for calculate_handicap."""
    config = get_config()
    return {
        'scale': config.handicap_scale,
        'low': config.handicap_min,
        'high': config.handicap_max,
    }


def balance_settings() -> dict[str, int]:
    """Keyword arguments for balance_teams."""
    config = get_config()
    return {
        'tolerance': config.repair_tolerance,
        'max_iterations': config.max_repair_iterations,
    }


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
