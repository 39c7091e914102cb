"""FastAPI moderation console: ad list, ad detail and statistics pages."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import AsyncIterator, Literal

import httpx
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from adreview.api.render import render_page
from adreview.client.api import ModerationClient, ModerationClientError
from adreview.client.models import Ad
from adreview.client.session import client_scope
from adreview.logic.charts import render_activity_chart, render_decisions_pie
from adreview.logic.filters import (
    FilterState,
    STATUSES,
    from_query_params,
    parse_sort_key,
    to_query_params,
    update_filter,
    update_sort,
)
from adreview.logic.listing import AdListFetcher, load_categories, page_numbers
from adreview.logic.moderation import (
    FormState,
    MissingReasonError,
    ModerationForm,
    ModerationSubmitter,
    action_availability,
)
from adreview.logic.navigation import AdNavigator
from adreview.logic.stats import DEFAULT_PERIOD, PERIODS, StatsAggregator, activity_bars, ranked_categories
from adreview.utils.labels import SORT_LABELS, STATUS_LABELS

load_dotenv()
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = FastAPI(title="Ad Review Console")

Period = Literal["today", "week", "month"]
SUBMIT_FAILED = "Не удалось отправить решение. Попробуйте ещё раз."


async def get_client() -> AsyncIterator[ModerationClient]:
    async with client_scope() as client:
        yield client


def list_url(filters: FilterState, page: int | None = None) -> str:
    items = list(to_query_params(filters).multi_items())
    if page is not None:
        items.append(("page", str(page)))
    query = str(httpx.QueryParams(items))
    return f"/list?{query}" if query else "/list"


def _html(name: str, context: dict, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    return HTMLResponse(render_page(name, context), status_code=status_code)


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
@app.get("/list", response_class=HTMLResponse)
async def ads_list(
    request: Request,
    page: int = Query(1, ge=1),
    client: ModerationClient = Depends(get_client),
) -> HTMLResponse:
    filters = from_query_params(request.query_params)
    fetcher = AdListFetcher(client, filters, page=page)
    categories, _ = await asyncio.gather(load_categories(client), fetcher.refresh())
    return _html(
        "list",
        {
            "ads": fetcher.ads,
            "pagination": fetcher.pagination,
            "page": fetcher.page,
            "pages": [(number, list_url(filters, number)) for number in page_numbers(fetcher.pagination)],
            "filters": filters,
            "categories": categories,
            "statuses": STATUS_LABELS,
            "sort_options": SORT_LABELS,
        },
    )


@app.get("/list/filter")
async def apply_filters(request: Request) -> RedirectResponse:
    """Target of the filter form: rebuild the state and move to page 1."""
    params = request.query_params
    filters = FilterState()
    filters = update_filter(filters, "status", [s for s in params.getlist("status") if s in STATUSES])
    for key in ("categoryId", "minPrice", "maxPrice", "search"):
        filters = update_filter(filters, key, params.get(key, ""))
    if "sort" in params:
        filters = update_sort(filters, *parse_sort_key(params["sort"]))
    return RedirectResponse(url=list_url(filters), status_code=status.HTTP_303_SEE_OTHER)


@app.get("/list/reset")
async def reset_list() -> RedirectResponse:
    return RedirectResponse(url="/list", status_code=status.HTTP_303_SEE_OTHER)


def _detail_page(
    ad: Ad,
    form: ModerationForm,
    *,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return _html(
        "detail",
        {
            "ad": ad,
            "form": form,
            "availability": action_availability(ad),
            "error": error,
        },
        status_code=status_code,
    )


def _not_found(ad_id: int) -> HTMLResponse:
    return _html("not_found", {"ad_id": ad_id}, status_code=status.HTTP_404_NOT_FOUND)


@app.get("/item/{ad_id}", response_class=HTMLResponse)
async def ad_detail(
    ad_id: int,
    form: FormState = FormState.IDLE,
    client: ModerationClient = Depends(get_client),
) -> HTMLResponse:
    submitter = ModerationSubmitter(client, ad_id)
    ad = await submitter.refresh()
    if ad is None:
        return _not_found(ad_id)
    if action_availability(ad).allows(form):
        submitter.form.open(form)
    return _detail_page(ad, submitter.form)


@app.get("/item/{ad_id}/navigate")
async def navigate(
    ad_id: int,
    offset: int = Query(..., ge=-1, le=1),
    client: ModerationClient = Depends(get_client),
) -> RedirectResponse:
    navigator = await AdNavigator.load(client)
    target = navigator.navigate(ad_id, offset)
    if target is None:
        target = ad_id
    return RedirectResponse(url=f"/item/{target}", status_code=status.HTTP_303_SEE_OTHER)


@app.post("/item/{ad_id}/approve")
async def approve(ad_id: int, client: ModerationClient = Depends(get_client)) -> RedirectResponse:
    await ModerationSubmitter(client, ad_id).approve()
    return RedirectResponse(url=f"/item/{ad_id}", status_code=status.HTTP_303_SEE_OTHER)


async def _submit_form(
    client: ModerationClient,
    ad_id: int,
    state: FormState,
    reasons: list[str],
    other_reason: str,
    comment: str,
) -> Response:
    submitter = ModerationSubmitter(client, ad_id)
    try:
        submitter.form = ModerationForm.from_submission(state, reasons, other_reason, comment)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        submitted = await submitter.submit()
    except MissingReasonError as exc:
        ad = await submitter.refresh()
        if ad is None:
            return _not_found(ad_id)
        return _detail_page(ad, submitter.form, error=str(exc), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
    if submitted:
        return RedirectResponse(url=f"/item/{ad_id}", status_code=status.HTTP_303_SEE_OTHER)
    ad = await submitter.refresh()
    if ad is None:
        return _not_found(ad_id)
    return _detail_page(ad, submitter.form, error=SUBMIT_FAILED, status_code=status.HTTP_502_BAD_GATEWAY)


@app.post("/item/{ad_id}/reject")
async def reject(
    ad_id: int,
    reasons: list[str] = Form([]),
    other_reason: str = Form(""),
    comment: str = Form(""),
    client: ModerationClient = Depends(get_client),
) -> Response:
    return await _submit_form(client, ad_id, FormState.REJECT_OPEN, reasons, other_reason, comment)


@app.post("/item/{ad_id}/request-changes")
async def request_changes(
    ad_id: int,
    reasons: list[str] = Form([]),
    other_reason: str = Form(""),
    comment: str = Form(""),
    client: ModerationClient = Depends(get_client),
) -> Response:
    return await _submit_form(client, ad_id, FormState.CHANGES_OPEN, reasons, other_reason, comment)


@app.get("/stats", response_class=HTMLResponse)
async def stats(
    period: Period = DEFAULT_PERIOD,
    client: ModerationClient = Depends(get_client),
) -> HTMLResponse:
    aggregator = StatsAggregator(client)
    snapshot = await aggregator.refresh(period)
    context = {
        "period": period,
        "periods": PERIODS,
        "snapshot": snapshot,
        "failed": aggregator.failed,
        "bars": activity_bars(snapshot.activity) if snapshot else [],
        "categories": ranked_categories(snapshot.categories) if snapshot else [],
    }
    return _html("stats", context)


@app.get("/stats/decisions.png")
async def decisions_chart(
    period: Period = DEFAULT_PERIOD,
    client: ModerationClient = Depends(get_client),
) -> Response:
    try:
        decisions = await client.decisions_chart(period)
    except ModerationClientError as exc:
        logger.warning("Failed to load decisions period=%s: %s", period, exc)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    chart = render_decisions_pie(decisions)
    if chart is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return Response(content=chart.content, media_type="image/png")


@app.get("/stats/activity.png")
async def activity_chart(
    period: Period = DEFAULT_PERIOD,
    client: ModerationClient = Depends(get_client),
) -> Response:
    try:
        points = await client.activity_chart(period)
    except ModerationClientError as exc:
        logger.warning("Failed to load activity period=%s: %s", period, exc)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    chart = render_activity_chart(points)
    if chart is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return Response(content=chart.content, media_type="image/png")
