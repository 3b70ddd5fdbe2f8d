"""Configuration module for ogmiosclient."""

from ogmiosclient.config.loader import load_config, get_config_path, save_config
from ogmiosclient.config.schema import Config
from ogmiosclient.config.access import get_config, set_config, clear_config_cache

__all__ = ["Config", "load_config", "save_config", "get_config_path", "get_config", "set_config", "clear_config_cache"]
