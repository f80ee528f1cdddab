"""Core: configuration and shared constants.

Single place for settings and shared constants.
"""

from docfill.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
