"""Configuration sub-package.

Quick usage::

    from tumor_volume_changes.config import get_setting

    decimals = get_setting("report.decimals")
"""

from __future__ import annotations

from tumor_volume_changes.config.settings import DEFAULTS, get_config, get_setting

__all__ = [
    "DEFAULTS",
    "get_config",
    "get_setting",
]
