"""Service facade tying the HTTP client, extractor and renderer together."""

from .converter import PageConverter, convert_blocking

__all__ = ["PageConverter", "convert_blocking"]
