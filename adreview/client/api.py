"""Async client for the moderation backend REST API."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from adreview.client.models import (
    ActivityPoint,
    Ad,
    AdsPage,
    CategoriesData,
    DecisionsData,
    StatsSummary,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api/v1"
HTTP_TIMEOUT = 30.0

ModelT = TypeVar("ModelT", bound=BaseModel)

_ACTIVITY_ADAPTER = TypeAdapter(list[ActivityPoint])
_CATEGORIES_ADAPTER = TypeAdapter(CategoriesData)


class ModerationClientError(Exception):
    """Base class for failures talking to the moderation backend."""


class ModerationAPIError(ModerationClientError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class ModerationTransportError(ModerationClientError):
    """Raised when the backend cannot be reached or times out."""


class ModerationDecodeError(ModerationClientError):
    """Raised when a response body does not match the expected payload."""


class ModerationClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: httpx.AsyncClient | None = None,
        timeout: float = HTTP_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self.session.aclose()

    async def __aenter__(self) -> "ModerationClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def list_ads(self, params: httpx.QueryParams | Mapping[str, Any]) -> AdsPage:
        payload = await self._request("GET", "/ads", params=params)
        return _decode(AdsPage, payload)

    async def get_ad(self, ad_id: int) -> Ad:
        payload = await self._request("GET", f"/ads/{ad_id}")
        return _decode(Ad, payload)

    async def approve(self, ad_id: int) -> None:
        await self._request("POST", f"/ads/{ad_id}/approve")

    async def reject(self, ad_id: int, reason: str, comment: str = "") -> None:
        await self._request(
            "POST", f"/ads/{ad_id}/reject", json={"reason": reason, "comment": comment}
        )

    async def request_changes(self, ad_id: int, reason: str, comment: str = "") -> None:
        await self._request(
            "POST",
            f"/ads/{ad_id}/request-changes",
            json={"reason": reason, "comment": comment},
        )

    async def stats_summary(self, period: str) -> StatsSummary:
        payload = await self._request("GET", "/stats/summary", params={"period": period})
        return _decode(StatsSummary, payload)

    async def activity_chart(self, period: str) -> list[ActivityPoint]:
        payload = await self._request("GET", "/stats/chart/activity", params={"period": period})
        return _decode_with(_ACTIVITY_ADAPTER, payload)

    async def decisions_chart(self, period: str) -> DecisionsData:
        payload = await self._request("GET", "/stats/chart/decisions", params={"period": period})
        return _decode(DecisionsData, payload)

    async def categories_chart(self, period: str) -> CategoriesData:
        payload = await self._request("GET", "/stats/chart/categories", params={"period": period})
        return _decode_with(_CATEGORIES_ADAPTER, payload)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        start_time = time.perf_counter()
        status_code: int | None = None
        try:
            response = await self.session.request(method, url, **kwargs)
            status_code = response.status_code
        except httpx.HTTPError as exc:
            raise ModerationTransportError(f"{method} {path}: {exc}") from exc
        finally:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            logger.info(
                "Backend request method=%s path=%s status=%s duration_ms=%s",
                method,
                path,
                status_code,
                duration_ms,
            )

        if not response.is_success:
            raise ModerationAPIError(response.status_code, _error_message(response))

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ModerationDecodeError(f"{method} {path}: invalid JSON") from exc


def _error_message(response: httpx.Response) -> str:
    """Pull the backend's ``{error, message}`` body apart, if there is one."""

    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(payload, dict):
        return str(payload.get("message") or payload.get("error") or response.reason_phrase)
    return response.reason_phrase


def _decode(model: Type[ModelT], payload: Any) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ModerationDecodeError(f"Unexpected {model.__name__} payload: {exc}") from exc


def _decode_with(adapter: TypeAdapter, payload: Any) -> Any:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise ModerationDecodeError(f"Unexpected payload: {exc}") from exc
