# src/services/catalog_loader.py

"""Catalog fetch from the remote product service.

One GET per session, no pagination, no retries: a failed fetch leaves
the catalog empty and keeps the error for the status line.
"""

import asyncio
import json
import logging
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.exceptions import FetchError
from src.filters.product_validator import ProductValidator
from src.models.display_state import LoadPhase
from src.models.product import Product


class CatalogLoader:
    """Fetches the full product list and tracks the load phase."""

    def __init__(self, url: str | None = None) -> None:
        self.logger = logging.getLogger("storefront.catalog")
        self.settings = Settings()
        self.url = url or self.settings.CATALOG_URL
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self.phase: LoadPhase = LoadPhase.IDLE
        self.products: list[Product] = []
        self.error: FetchError | None = None
        self.dropped_count: int = 0

    def _fetch_payload(self) -> list[Any]:
        """GET the catalog and return the decoded JSON array."""
        try:
            resp = self.session.get(
                self.url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            raise FetchError(
                "TRANSPORT", str(exc), url=self.url,
            ) from exc

        if resp.status_code != 200:
            raise FetchError(
                "HTTP_STATUS",
                f"HTTP {resp.status_code}",
                url=self.url,
                status=resp.status_code,
            )

        try:
            data: Any = json.loads(resp.text)
        except json.JSONDecodeError as exc:
            raise FetchError(
                "BAD_PAYLOAD", f"Invalid JSON: {exc}", url=self.url,
            ) from exc

        if not isinstance(data, list):
            raise FetchError(
                "BAD_PAYLOAD",
                f"Expected a JSON array, got {type(data).__name__}",
                url=self.url,
            )
        return data

    def load(self) -> list[Product]:
        """Fetch and parse the catalog.

        Moves through ``LOADING`` to ``LOADED`` or ``FAILED``.  On
        failure the product list stays empty, the error is kept on
        ``self.error`` and re-raised.
        """
        self.phase = LoadPhase.LOADING
        self.products = []
        self.error = None
        self.logger.info("Fetching catalog from %s", self.url)

        try:
            records = self._fetch_payload()
        except FetchError as exc:
            self.phase = LoadPhase.FAILED
            self.error = exc
            self.logger.error(
                "Catalog fetch failed: %s", exc, exc_info=True
            )
            raise

        self.products, self.dropped_count = ProductValidator.validate(
            records
        )
        self.phase = LoadPhase.LOADED
        self.logger.info(
            "Loaded %d products (%d records dropped)",
            len(self.products),
            self.dropped_count,
        )
        return list(self.products)

    async def load_async(self) -> list[Product]:
        """Run :meth:`load` in a worker thread."""
        products: list[Product] = await asyncio.to_thread(self.load)
        return products
