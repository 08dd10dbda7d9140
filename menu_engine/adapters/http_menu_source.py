"""Menu snapshots fetched from the menu backend over HTTP."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from menu_engine.components.catalog import ParseMenuInput, run
from menu_engine.domain.entities import MenuSnapshot, MenuVariant
from menu_engine.ports.menu_source import MenuSourceError
from menu_engine.rules.models import BackendRules

logger = logging.getLogger(__name__)


class HttpMenuSource:
    """Fetches ``GET <base_url><menu_path>?ownerId=&menuId=`` and maps the document."""

    def __init__(
        self,
        base_url: str,
        *,
        menu_path: str = "/ris/v1/menu",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}{menu_path}"
        self._timeout = timeout_seconds
        self._transport = transport

    @classmethod
    def from_rules(
        cls,
        backend: BackendRules,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> HttpMenuSource:
        return cls(
            backend.base_url,
            menu_path=backend.menu_path,
            timeout_seconds=backend.timeout_seconds,
            transport=transport,
        )

    async def fetch_menu(
        self,
        owner_id: str,
        menu_id: str,
        variant: MenuVariant = "control",
    ) -> MenuSnapshot:
        document = await self._fetch_document(owner_id, menu_id)
        return self._map(document, owner_id, menu_id, variant)

    async def fetch_experiment(
        self,
        owner_id: str,
        menu_id: str,
    ) -> tuple[MenuSnapshot, MenuSnapshot]:
        """Control and test snapshots mapped from a single backend request."""
        document = await self._fetch_document(owner_id, menu_id)
        return (
            self._map(document, owner_id, menu_id, "control"),
            self._map(document, owner_id, menu_id, "test"),
        )

    async def _fetch_document(self, owner_id: str, menu_id: str) -> dict[str, Any]:
        params = {"ownerId": owner_id, "menuId": menu_id}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, params=params)
        except httpx.HTTPError as exc:
            logger.error("Menu backend unreachable: %s", exc)
            raise MenuSourceError("Menu backend is unreachable") from exc

        if response.status_code == 404:
            raise MenuSourceError(f"Menu {menu_id} not found for owner {owner_id}")
        if not response.is_success:
            logger.error("Menu fetch failed (%s) for %s/%s", response.status_code, owner_id, menu_id)
            raise MenuSourceError(f"Menu backend returned {response.status_code}")

        try:
            document = response.json()
        except ValueError as exc:
            raise MenuSourceError("Menu backend returned invalid JSON") from exc
        if not isinstance(document, dict):
            raise MenuSourceError("Menu backend returned an unexpected document")
        return document

    def _map(
        self,
        document: dict[str, Any],
        owner_id: str,
        menu_id: str,
        variant: MenuVariant,
    ) -> MenuSnapshot:
        out = run(
            ParseMenuInput(owner_id=owner_id, menu_id=menu_id, document=document, variant=variant)
        )
        for error in out.errors:
            logger.warning(
                "Dropped %s entry %s of menu %s (%s): %s",
                error.code,
                error.index,
                menu_id,
                variant,
                error.message,
            )
        return out.snapshot
