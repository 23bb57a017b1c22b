"""
Load configuration.
"""

from .settings import ColumnConfig, LoadSettings

__all__ = ["ColumnConfig", "LoadSettings"]
