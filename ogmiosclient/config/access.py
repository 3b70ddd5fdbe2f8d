"""Process-wide configuration cache.

``get_config`` loads a config file once per resolved path. The CLI pins the
config it built from its options with ``set_config`` so that clients created
deeper down see the same values.
"""

from __future__ import annotations

import threading
from pathlib import Path

from ogmiosclient.config.loader import get_config_path, load_config
from ogmiosclient.config.schema import Config

_lock = threading.RLock()
_cache: dict[str, Config] = {}


def _resolve(config_path: Path | str | None) -> str:
    path = Path(config_path) if config_path else get_config_path()
    return str(path.expanduser().resolve())


def get_config(*, config_path: Path | str | None = None, force_reload: bool = False) -> Config:
    """Return the cached config for ``config_path`` (default file when omitted)."""
    key = _resolve(config_path)
    with _lock:
        if force_reload or key not in _cache:
            _cache[key] = load_config(Path(key))
        return _cache[key]


def set_config(config: Config, *, config_path: Path | str | None = None) -> None:
    """Pin ``config`` as the cached value for ``config_path``."""
    with _lock:
        _cache[_resolve(config_path)] = config


def clear_config_cache(*, config_path: Path | str | None = None) -> None:
    """Drop one cached entry, or all of them."""
    with _lock:
        if config_path is None:
            _cache.clear()
        else:
            _cache.pop(_resolve(config_path), None)
