"""Statistics dashboard data."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from adreview.client.api import ModerationClient, ModerationClientError
from adreview.client.models import ActivityPoint, CategoriesData, DecisionsData, StatsSummary

logger = logging.getLogger(__name__)

PERIODS = ("today", "week", "month")
DEFAULT_PERIOD = "week"


@dataclass(slots=True)
class StatsSnapshot:
    period: str
    summary: StatsSummary
    activity: list[ActivityPoint]
    decisions: DecisionsData
    categories: CategoriesData


@dataclass(slots=True)
class ActivityBar:
    date: str
    total: int
    height_pct: float


@dataclass
class StatsAggregator:
    """Fetches the four dashboard payloads for a period.

    The fetches run together and are applied together: if one fails the
    previous snapshot is kept and ``failed`` is set.
    """

    client: ModerationClient
    snapshot: StatsSnapshot | None = None
    failed: bool = False
    period: str = DEFAULT_PERIOD

    async def refresh(self, period: str | None = None) -> StatsSnapshot | None:
        period = period or self.period
        if period not in PERIODS:
            raise ValueError(f"Unknown period: {period}")
        self.period = period
        try:
            summary, activity, decisions, categories = await asyncio.gather(
                self.client.stats_summary(period),
                self.client.activity_chart(period),
                self.client.decisions_chart(period),
                self.client.categories_chart(period),
            )
        except ModerationClientError as exc:
            logger.warning("Failed to load statistics period=%s: %s", period, exc)
            self.failed = True
            return self.snapshot
        self.failed = False
        self.snapshot = StatsSnapshot(
            period=period,
            summary=summary,
            activity=activity,
            decisions=decisions,
            categories=categories,
        )
        return self.snapshot


def activity_bars(points: Sequence[ActivityPoint]) -> list[ActivityBar]:
    """Bar heights as a percentage of the busiest day."""
    if not points:
        return []
    totals = np.array([point.total for point in points], dtype=float)
    peak = max(float(totals.max()), 1.0)
    heights = totals / peak * 100
    return [
        ActivityBar(date=point.date, total=point.total, height_pct=round(float(height), 2))
        for point, height in zip(points, heights)
    ]


def ranked_categories(categories: CategoriesData) -> list[tuple[str, int]]:
    return sorted(categories.items(), key=lambda item: item[1], reverse=True)
