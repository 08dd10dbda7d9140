"""Analytics batches posted to the menu backend."""

from __future__ import annotations

import logging

import httpx

from menu_engine.components.engagement.models import AnalyticsBatch
from menu_engine.rules.models import BackendRules

logger = logging.getLogger(__name__)


class HttpFlushTransport:
    """
    Posts analytics batches as JSON.

    Network errors and non-2xx responses are reported as a rejected batch so
    the buffer keeps the data for the next flush.
    """

    def __init__(
        self,
        base_url: str,
        *,
        analytics_path: str = "/ris/v1/menu/analytics",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}{analytics_path}"
        self._timeout = timeout_seconds
        self._transport = transport

    @classmethod
    def from_rules(
        cls,
        backend: BackendRules,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> HttpFlushTransport:
        return cls(
            backend.base_url,
            analytics_path=backend.analytics_path,
            timeout_seconds=backend.timeout_seconds,
            transport=transport,
        )

    async def submit_analytics(self, batch: AnalyticsBatch) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, json=batch.to_payload())
        except httpx.HTTPError as exc:
            logger.error("Analytics endpoint unreachable: %s", exc)
            return False

        if not response.is_success:
            logger.error(
                "Analytics rejected (%s) for %s/%s",
                response.status_code,
                batch.owner_id,
                batch.menu_id,
            )
            return False
        return True
