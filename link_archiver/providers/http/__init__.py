"""Plain HTTP helpers used before the browser is involved."""

from link_archiver.providers.http.header_probe import HttpHeaderProbe

__all__ = ["HttpHeaderProbe"]
