"""Captcha solving backends."""

from link_archiver.providers.captcha.flaresolverr_provider import FlareSolverrProvider

__all__ = ["FlareSolverrProvider"]
