"""
Network-probe collaborator.

Performs best-effort reachability checks. Only status metadata travels back
to the shell; response bodies are never read.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    """Outcome of a probe."""

    url: str
    reachable: bool
    status_code: Optional[int] = None
    reason: str = ""
    http_version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None


class Unreachable(Exception):
    """The probed URL could not be reached."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to connect to {url}: {reason}")


def normalize_url(url: str) -> str:
    """Add a scheme to bare hosts (``example.com`` -> ``https://example.com``)."""
    if "://" not in url:
        return f"https://{url}"
    return url


class NetworkProbe(ABC):
    """Abstract network probe."""

    @abstractmethod
    async def probe(self, url: str, timeout: float) -> ProbeResult:
        """
        Probe a URL.

        Never raises: failures come back as ``ProbeResult(reachable=False)``.
        """
        pass


class HttpxNetworkProbe(NetworkProbe):
    """Probe implemented with an ``httpx.AsyncClient`` HEAD request."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            transport: Optional transport override (e.g. ``httpx.MockTransport``)
        """
        self._transport = transport

    async def probe(self, url: str, timeout: float) -> ProbeResult:
        url = normalize_url(url)
        try:
            return await self._head(url, timeout)
        except Unreachable as e:
            logger.debug(f"Probe failed: {e}")
            return ProbeResult(url=url, reachable=False, error=e.reason)

    async def _head(self, url: str, timeout: float) -> ProbeResult:
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.head(url)
        except httpx.TimeoutException:
            raise Unreachable(url, "Connection timed out")
        except httpx.InvalidURL as e:
            raise Unreachable(url, f"Invalid URL ({e})")
        except httpx.HTTPError as e:
            raise Unreachable(url, str(e) or e.__class__.__name__)

        return ProbeResult(
            url=url,
            reachable=True,
            status_code=response.status_code,
            reason=response.reason_phrase,
            http_version=response.http_version,
            headers=dict(response.headers),
        )
