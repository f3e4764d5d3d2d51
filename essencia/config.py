"""Engine configuration management."""

import logging
import os
from functools import lru_cache
from pathlib import Path

from .schemas import EngineConfig
from .utils import load_json

logger = logging.getLogger('essencia.config')

CONFIG_ENV_VAR = 'ESSENCIA_CONFIG'
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'engine_config.json'


def get_config_path() -> Path:
    """Resolve the config file path ($ESSENCIA_CONFIG overrides the bundled file)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else DEFAULT_CONFIG_PATH


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
    """
    Load engine configuration from data/engine_config.json.

    Configuration is cached after first load. A missing file yields the
    built-in defaults; a malformed one is an error.

    Returns:
        EngineConfig object with validated settings

    Raises:
        ValueError: If the config file has invalid structure

    Example:
        from essencia.config import get_config
        config = get_config()
        print(f"Cycle length: {config.default_cycle_days}")
    """
    config_path = get_config_path()
    if not config_path.exists():
        logger.debug(f'No config file at {config_path}, using defaults')
        return EngineConfig()
    return load_json(config_path, schema=EngineConfig)


def get_default_cycle_days() -> int:
    """Get the default cycle length in days."""
    return get_config().default_cycle_days


def get_unlock_threshold() -> float:
    """Get the Carteira II local unlock threshold (percent)."""
    return get_config().unlock_threshold


def get_csv_download_timeout() -> float:
    """Get the CSV download timeout in seconds."""
    return get_config().csv_download_timeout


def get_csv_max_bytes() -> int:
    """Get the maximum accepted CSV body size in bytes."""
    return get_config().csv_max_bytes


def get_percentage_tolerance() -> float:
    """Get the tolerance (percentage points) for percentage reconciliation."""
    return get_config().percentage_tolerance


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file (or $ESSENCIA_CONFIG) changes at runtime.
    """
    get_config.cache_clear()
