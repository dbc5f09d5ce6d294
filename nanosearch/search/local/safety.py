"""URL policy for the hidden search browser."""

from __future__ import annotations

import ipaddress
from collections.abc import Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlparse

if TYPE_CHECKING:
    from nanosearch.config.schema import LocalSearchConfig

_LOCAL_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "host.docker.internal",
}

_WEB_SCHEMES = {"http", "https"}
# Inline resources a rendered page may legitimately request.
_PASSIVE_SCHEMES = {"about", "blob", "data"}


@dataclass(frozen=True, slots=True)
class UrlPolicy:
    """Decides which URLs the search browser may open or fetch."""

    allow_private_network: bool = False
    block_file_scheme: bool = True

    @classmethod
    def from_config(cls, config: "LocalSearchConfig") -> "UrlPolicy":
        return cls(
            allow_private_network=config.allow_private_network,
            block_file_scheme=config.block_file_scheme,
        )

    def navigation_error(self, url: str) -> str | None:
        """Return why `url` may not be navigated to, or None when allowed."""
        return self._check(url, extra_schemes=())

    def request_block_reason(self, url: str) -> str | None:
        """Return why a page sub-request must be aborted, or None when allowed."""
        return self._check(url, extra_schemes=_PASSIVE_SCHEMES)

    def _check(self, url: str, *, extra_schemes: Collection[str]) -> str | None:
        parsed = urlparse(url)
        scheme = (parsed.scheme or "").lower()

        if scheme == "file" and self.block_file_scheme:
            return "file:// URLs are blocked"
        if scheme in extra_schemes:
            return None
        if scheme not in _WEB_SCHEMES:
            return f"Only http/https URLs are allowed, got '{scheme or 'none'}'"

        host = parsed.hostname
        if not host:
            return "URL host is required"
        if not self.allow_private_network and is_private_or_local_host(host):
            return f"Private/local host blocked: {host}"
        return None


def is_private_or_local_host(host: str) -> bool:
    """Check whether a host is local/private based on hostname or literal IP."""
    normalized = host.rstrip(".").lower()

    if normalized in _LOCAL_HOSTNAMES or normalized.endswith(".local"):
        return True

    try:
        ip = ipaddress.ip_address(normalized)
    except ValueError:
        return False

    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    )
