"""Process-wide settings read from the environment."""

from src.settings.app import AppSettings, get_settings


__all__ = ["AppSettings", "get_settings"]
