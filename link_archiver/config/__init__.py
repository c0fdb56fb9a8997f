"""Configuration module -- exports the Settings class."""

from link_archiver.config.settings import Settings

__all__ = ["Settings"]
