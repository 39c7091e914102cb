"""Previous/next stepping through the review queue."""

from __future__ import annotations

import logging
from typing import Sequence

from adreview.client.api import ModerationClient, ModerationClientError
from adreview.logic.listing import load_window

logger = logging.getLogger(__name__)


class AdNavigator:
    """Steps through ads in the order the backend listed them."""

    def __init__(self, order: Sequence[int]) -> None:
        self.order = list(order)

    @classmethod
    async def load(cls, client: ModerationClient) -> "AdNavigator":
        try:
            ads = await load_window(client)
        except ModerationClientError as exc:
            logger.warning("Failed to load review order: %s", exc)
            return cls([])
        return cls([ad.id for ad in ads])

    def navigate(self, current_id: int, offset: int) -> int | None:
        """Id of the ad ``offset`` places away, or None when out of range."""
        try:
            position = self.order.index(current_id)
        except ValueError:
            return None
        target = position + offset
        if 0 <= target < len(self.order):
            return self.order[target]
        return None

    def previous(self, current_id: int) -> int | None:
        return self.navigate(current_id, -1)

    def next(self, current_id: int) -> int | None:
        return self.navigate(current_id, 1)
