"""Pydantic models for the moderation backend payloads."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

AdStatus = Literal["pending", "approved", "rejected", "draft"]
AdPriority = Literal["normal", "urgent"]
ModerationAction = Literal["approved", "rejected", "requestChanges"]

CategoriesData = Dict[str, int]


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Seller(_Payload):
    """Seller embedded by value inside an ad."""

    id: int
    name: str
    rating: str
    total_ads: int = 0
    registered_at: str


class ModerationHistoryEntry(_Payload):
    """A single moderation decision recorded on an ad."""

    id: int
    moderator_id: int
    moderator_name: str
    action: ModerationAction
    reason: Optional[str] = None
    comment: Optional[str] = None
    timestamp: str


class Ad(_Payload):
    """A classified listing subject to moderation."""

    id: int
    title: str
    description: str = ""
    price: float
    category: str
    category_id: int
    status: AdStatus
    priority: AdPriority = "normal"
    created_at: str
    updated_at: str
    images: List[str] = Field(default_factory=list)
    seller: Seller
    characteristics: Dict[str, str] = Field(default_factory=dict)
    moderation_history: List[ModerationHistoryEntry] = Field(default_factory=list)

    @property
    def is_urgent(self) -> bool:
        return self.priority == "urgent"

    @property
    def cover_image(self) -> Optional[str]:
        return self.images[0] if self.images else None


class Pagination(_Payload):
    current_page: int = 1
    total_pages: int = 1
    total_items: int = 0
    items_per_page: int = 10


class AdsPage(_Payload):
    """API response for ``GET /ads``."""

    ads: List[Ad] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class StatsSummary(_Payload):
    total_reviewed: int = 0
    total_reviewed_today: int = 0
    total_reviewed_this_week: int = 0
    total_reviewed_this_month: int = 0
    approved_percentage: float = 0.0
    rejected_percentage: float = 0.0
    request_changes_percentage: float = 0.0
    average_review_time: float = 0.0


class ActivityPoint(_Payload):
    """Decisions taken on a single day."""

    date: str
    approved: int = 0
    rejected: int = 0
    request_changes: int = 0

    @property
    def total(self) -> int:
        return self.approved + self.rejected + self.request_changes


class DecisionsData(_Payload):
    approved: int = 0
    rejected: int = 0
    request_changes: int = 0

    @property
    def total(self) -> int:
        return self.approved + self.rejected + self.request_changes


class Category(BaseModel):
    """Category option for the list filter."""

    id: int
    name: str
