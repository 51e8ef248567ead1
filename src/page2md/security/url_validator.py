"""URL validation for security and policy compliance."""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urlparse


def normalize_url(url: str) -> str:
    """
    Trim a user supplied URL and default it to https when it has no scheme.

    Example:
        >>> normalize_url("  example.com/post ")
        'https://example.com/post'
    """
    url = url.strip()
    if url and "://" not in url:
        url = "https://" + url.lstrip("/")
    return url


@dataclass
class UrlValidationResult:
    """Result of URL validation."""

    is_valid: bool
    rejection_reason: str | None = None

    @staticmethod
    def valid() -> UrlValidationResult:
        """Create a valid result."""
        return UrlValidationResult(is_valid=True)

    @staticmethod
    def invalid(reason: str) -> UrlValidationResult:
        """Create an invalid result with reason."""
        return UrlValidationResult(is_valid=False, rejection_reason=reason)


class UrlValidator:
    """
    Validates URLs before the service fetches them.

    The service fetches whatever URL a client hands it, so by default it
    refuses targets that would reach into the host's own network:
    - Schemes other than http/https
    - Private/internal IP addresses
    - Localhost and internal domain suffixes
    - URLs not in the allowed domains list (if configured)

    Example:
        validator = UrlValidator(allowed_schemes={"https"})
        result = validator.validate("https://example.com/page")
        if not result.is_valid:
            print(f"Rejected: {result.rejection_reason}")
    """

    DEFAULT_ALLOWED_SCHEMES = frozenset({"http", "https"})
    INTERNAL_SUFFIXES = (".internal", ".local", ".localhost", ".localdomain")
    LOCALHOST_NAMES = frozenset({"localhost", "localhost.localdomain"})

    def __init__(
        self,
        allowed_schemes: Iterable[str] | None = None,
        allowed_domains: Iterable[str] | None = None,
        block_private_ips: bool = True,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the URL validator.

        Args:
            allowed_schemes: Allowed URL schemes (default: http and https)
            allowed_domains: If set, only these hosts are allowed
            block_private_ips: Whether to block private and internal hosts
            logger: Optional logger for validation messages
        """
        self.allowed_schemes = set(allowed_schemes or self.DEFAULT_ALLOWED_SCHEMES)
        self.allowed_domains = {d.lower() for d in allowed_domains} if allowed_domains is not None else None
        self.block_private_ips = block_private_ips
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, url: str) -> UrlValidationResult:
        """
        Validate a URL for security and policy compliance.

        Args:
            url: The URL to validate

        Returns:
            UrlValidationResult with is_valid and optional rejection_reason
        """
        try:
            parsed = urlparse(url)
            hostname = (parsed.hostname or "").lower()
        except ValueError:
            return UrlValidationResult.invalid("malformed URL")

        if parsed.scheme not in self.allowed_schemes:
            allowed = ", ".join(sorted(self.allowed_schemes))
            return UrlValidationResult.invalid(f"scheme '{parsed.scheme}' not allowed (allowed: {allowed})")

        if not hostname:
            return UrlValidationResult.invalid("URL has no host")

        if self.allowed_domains is not None and hostname not in self.allowed_domains:
            return UrlValidationResult.invalid(f"domain '{hostname}' not in allowed list")

        if self.block_private_ips:
            if hostname in self.LOCALHOST_NAMES:
                return UrlValidationResult.invalid("localhost URLs not allowed")

            for suffix in self.INTERNAL_SUFFIXES:
                if hostname.endswith(suffix):
                    return UrlValidationResult.invalid(f"internal domain suffix '{suffix}' not allowed")

            ip_result = self._check_ip_address(hostname)
            if ip_result is not None:
                self.logger.debug(f"Rejected {url}: {ip_result.rejection_reason}")
                return ip_result

        return UrlValidationResult.valid()

    def _check_ip_address(self, hostname: str) -> UrlValidationResult | None:
        """
        Check if hostname is a private/internal IP address.

        Returns:
            UrlValidationResult if IP is blocked, None if hostname is not a blocked IP
        """
        try:
            ip = ipaddress.ip_address(hostname)
        except ValueError:
            # Not an IP address (it's a domain name)
            return None

        if ip.is_loopback:
            return UrlValidationResult.invalid(f"loopback IP address '{hostname}' not allowed")
        if ip.is_link_local:
            return UrlValidationResult.invalid(f"link-local IP address '{hostname}' not allowed")
        if ip.is_private:
            return UrlValidationResult.invalid(f"private IP address '{hostname}' not allowed")
        if ip.is_reserved or ip.is_unspecified:
            return UrlValidationResult.invalid(f"reserved IP address '{hostname}' not allowed")
        if isinstance(ip, ipaddress.IPv6Address) and ip.is_site_local:
            return UrlValidationResult.invalid(f"site-local IPv6 address '{hostname}' not allowed")

        return None

    def is_valid(self, url: str) -> bool:
        """Quick check if URL is valid."""
        return self.validate(url).is_valid
