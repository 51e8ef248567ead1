"""URL policy for page2md."""

from .url_validator import UrlValidationResult, UrlValidator, normalize_url

__all__ = ["UrlValidator", "UrlValidationResult", "normalize_url"]
