"""Settings module -- single entry point for application configuration.

:func:`get_config` returns the merged configuration.  It loads
``config/default.yaml`` and then applies any ``TVC_`` prefixed environment
variable overrides.  Built-in defaults cover every key, so a missing
configuration file is not an error.
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any

from tumor_volume_changes.domain.models import AppConfig

# Project root is three levels up from ``src/tumor_volume_changes/config/``.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

DEFAULTS: dict[str, Any] = {
    "output.filename": "volume_changes_stats.json",
    "report.decimals": 3,
    "logging.level": "INFO",
}


@functools.lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Return the merged :class:`AppConfig`.

    The result is cached so that repeated calls within the same process are
    essentially free.

    Resolution order:

    1. ``config/default.yaml``
    2. Environment variables with ``TVC_`` prefix
    """
    default_path = _PROJECT_ROOT / "config" / "default.yaml"
    return AppConfig.load(default_path=default_path, env_prefix="TVC_")


def get_setting(dotted_key: str, config: AppConfig | None = None) -> Any:
    """Look up *dotted_key*, falling back to the built-in default."""
    cfg = config if config is not None else get_config()
    return cfg.get(dotted_key, DEFAULTS.get(dotted_key))
