"""Paginated ad list state."""

from __future__ import annotations

import itertools
import logging
from typing import Any

from adreview.client.api import ModerationClient, ModerationClientError
from adreview.client.models import Ad, Category, Pagination
from adreview.logic.filters import (
    FilterState,
    api_params,
    reset_filters,
    to_query_params,
    update_filter,
    update_sort,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = 10
# Window used to derive categories and the review order; ads past it are not seen.
CATEGORY_WINDOW = 150


class AdListFetcher:
    """Holds one list view: filters, current page and the last good response.

    Each refresh takes a generation number. When an older refresh finishes
    after a newer one has started, its response is dropped.
    """

    def __init__(
        self,
        client: ModerationClient,
        filters: FilterState | None = None,
        *,
        page: int = 1,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.client = client
        self.filters = filters or FilterState()
        self.page = page
        self.page_size = page_size
        self.ads: list[Ad] = []
        self.pagination = Pagination(items_per_page=page_size)
        self.loading = False
        self._generation = itertools.count(1)
        self._current = 0

    @property
    def query_params(self):
        """Filters as they should appear in the page URL."""
        return to_query_params(self.filters)

    async def refresh(self) -> bool:
        """Load the current page. Returns False when the response was not applied."""
        token = next(self._generation)
        self._current = token
        self.loading = True
        params = api_params(self.filters, self.page, self.page_size)
        try:
            result = await self.client.list_ads(params)
        except ModerationClientError as exc:
            logger.warning("Failed to load ads page=%s: %s", self.page, exc)
            return False
        finally:
            if token == self._current:
                self.loading = False
        if token != self._current:
            logger.debug("Discarding stale ads response page=%s", params.get("page"))
            return False
        self.ads = result.ads
        self.pagination = result.pagination
        self.page = result.pagination.current_page or 1
        return True

    async def go_to_page(self, page: int) -> bool:
        self.page = page
        return await self.refresh()

    async def apply_filter(self, key: str, value: Any) -> bool:
        self.filters = update_filter(self.filters, key, value)
        self.page = 1
        return await self.refresh()

    async def apply_sort(self, sort_by: str, sort_order: str) -> bool:
        self.filters = update_sort(self.filters, sort_by, sort_order)
        self.page = 1
        return await self.refresh()

    async def reset(self) -> bool:
        self.filters = reset_filters()
        self.page = 1
        return await self.refresh()


def page_numbers(pagination: Pagination) -> list[int]:
    return list(range(1, max(pagination.total_pages, 1) + 1))


async def load_window(client: ModerationClient) -> list[Ad]:
    """Fetch the first CATEGORY_WINDOW ads in backend order."""
    result = await client.list_ads({"page": 1, "limit": CATEGORY_WINDOW})
    return result.ads


async def load_categories(client: ModerationClient) -> list[Category]:
    """Distinct categories seen in the first CATEGORY_WINDOW ads."""
    try:
        ads = await load_window(client)
    except ModerationClientError as exc:
        logger.warning("Failed to load categories: %s", exc)
        return []
    seen: dict[int, Category] = {}
    for ad in ads:
        seen.setdefault(ad.category_id, Category(id=ad.category_id, name=ad.category))
    return list(seen.values())
