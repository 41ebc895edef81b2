"""Karbon API access (one HTTP client per call, like a per-query connection)"""

import logging
from typing import Any, Optional

import httpx

from karbon_mcp.config import KarbonAPIConfig
from karbon_mcp.errors import KarbonToolError, normalize_error
from karbon_mcp.odata import RemoteQuery

logger = logging.getLogger("Karbon_MCP")


class KarbonClient:
    """Authenticated, read-only access to the Karbon REST API"""

    def __init__(self, config: KarbonAPIConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.config.bearer_token}",
            "AccessKey": self.config.access_key,
            "Content-Type": "application/json",
        }

    def _open(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=self._headers(),
            timeout=self.config.timeout,
            transport=self._transport,
        )

    async def get(self, query: RemoteQuery) -> Any:
        """Issue one GET and return the decoded JSON body.

        Any failure is raised as a classified protocol error. Nothing is retried.
        """
        logger.debug(f"GET {query.path} {dict(query.params)}")
        async with self._open() as http:
            try:
                response = await http.get(query.path, params=dict(query.params))
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
                raise normalize_error(e) from e

    async def get_or_default(self, query: RemoteQuery, default: Any) -> Any:
        """Like get(), but a failed request yields ``default`` instead of raising"""
        try:
            return await self.get(query)
        except KarbonToolError as e:
            logger.warning(f"Falling back to empty result for {query.path}: {e.message}")
            return default
