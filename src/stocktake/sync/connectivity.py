"""Connectivity probes.

HttpConnectivityProbe decides reachability by issuing a lightweight HTTP
request. Any HTTP response, including an error status, proves the network
path works; only transport-level failures count as offline.
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0


class HttpConnectivityProbe:
    """Checks connectivity with a HEAD request to a fixed URL."""

    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the probe.

        Args:
            url: URL to probe, typically a health endpoint of the remote.
            timeout_seconds: Timeout for the whole request.
            transport: Optional httpx transport (used by tests).
        """
        self._url = url
        self._timeout = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return self._url

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=False,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def is_connected(self) -> bool:
        """Return True if the probe URL answered with any HTTP response."""
        client = self._get_client()
        try:
            response = await client.head(self._url)
        except httpx.TimeoutException as e:
            logger.debug("Connectivity probe timed out: %s", e)
            return False
        except httpx.TransportError as e:
            logger.debug("Connectivity probe failed: %s", e)
            return False

        logger.debug(
            "Connectivity probe %s answered HTTP %d", self._url, response.status_code
        )
        return True


class StaticConnectivity:
    """Probe with a fixed answer, used when no probe URL is configured."""

    def __init__(self, connected: bool = False) -> None:
        self.connected = connected

    async def is_connected(self) -> bool:
        return self.connected
