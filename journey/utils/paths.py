"""
Centralised path helpers for Learning Journey.

* ``base_path()``  – project root (directory containing ``config/``).
* ``logs_dir()``   – ``logs/<subdir>`` (created lazily).
"""

import os
from pathlib import Path
from typing import Optional

_cached_base: Optional[str] = None


def base_path() -> str:
    """Return the project root (directory containing ``config/``).

    Resolution order:
    1. ``JOURNEY_ROOT`` environment variable (normalised).
    2. Walk up from *this* file (up to 6 levels) looking for ``config/``.
    3. Current working directory as last resort.

    The result is cached after the first call.
    """
    global _cached_base
    if _cached_base is not None:
        return _cached_base

    env = os.environ.get("JOURNEY_ROOT")
    if env:
        _cached_base = os.path.normpath(env)
        return _cached_base

    cur = Path(__file__).resolve().parent
    for _ in range(6):
        if (cur / "config").is_dir():
            _cached_base = str(cur)
            return _cached_base
        cur = cur.parent

    _cached_base = os.getcwd()
    return _cached_base


def reset_base_path() -> None:
    """Forget the cached root (used after changing ``JOURNEY_ROOT``)."""
    global _cached_base
    _cached_base = None


def logs_dir(subdir: str = "", root: Optional[str] = None) -> str:
    """Return (and ensure existence of) ``logs/<subdir>`` under root (default: project root)."""
    root = root or base_path()
    d = os.path.join(root, "logs", subdir) if subdir else os.path.join(root, "logs")
    os.makedirs(d, exist_ok=True)
    return d
