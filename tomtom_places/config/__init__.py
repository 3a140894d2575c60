"""Configuration loading for TomTom Places client."""

from .manager import ConfigManager

__all__ = ["ConfigManager"]
