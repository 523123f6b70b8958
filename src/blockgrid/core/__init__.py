"""Core package initializer for BlockGrid.

Settings, logging, errors and the data contracts live here:
    from blockgrid.core.settings import settings, load_settings, Settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
