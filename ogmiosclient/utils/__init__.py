"""Utility functions for ogmiosclient."""

from ogmiosclient.utils.helpers import camel_to_snake, get_data_path, snake_to_camel

__all__ = ["camel_to_snake", "snake_to_camel", "get_data_path"]
