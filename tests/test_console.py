import json
from urllib.parse import parse_qsl

import httpx
import pytest
from fastapi.testclient import TestClient

from adreview.api.main import app
from conftest import BASE_URL, ads_page, load_fixture, make_ad


@pytest.fixture()
def console(monkeypatch, backend):
    monkeypatch.setenv("MODERATION_API_URL", BASE_URL)
    with TestClient(app) as test_client:
        yield test_client


def test_list_page_renders_ads_and_categories(console, backend):
    backend.get("/ads", params__contains={"limit": "150"}).respond(
        200, json=ads_page([make_ad(1, category="Электроника", categoryId=4)])
    )
    page_route = backend.get("/ads", params__contains={"limit": "10"}).respond(
        200, json=ads_page([make_ad(1), make_ad(2)], current_page=2, total_pages=3)
    )

    response = console.get("/list", params=[("status", "approved"), ("status", "pending"), ("page", "2")])

    assert response.status_code == 200
    assert "Объявление 1" in response.text
    assert '<option value="4"' in response.text
    assert page_route.calls.last.request.url.params.multi_items() == [
        ("page", "2"),
        ("limit", "10"),
        ("status", "approved"),
        ("status", "pending"),
    ]
    assert "/list?status=approved&amp;status=pending&amp;page=3" in response.text


def test_root_is_the_list(console, backend):
    backend.get("/ads").respond(200, json=ads_page([]))
    response = console.get("/")
    assert response.status_code == 200
    assert "Объявления не найдены" in response.text


def test_list_survives_backend_outage(console, backend):
    backend.get("/ads").respond(500, json={"error": "Что-то пошло не так!"})
    response = console.get("/list")
    assert response.status_code == 200
    assert "Объявления не найдены" in response.text


def test_filter_form_redirects_to_serialized_query(console):
    response = console.get(
        "/list/filter",
        params=[
            ("status", "approved"),
            ("status", "pending"),
            ("categoryId", ""),
            ("minPrice", "100"),
            ("maxPrice", ""),
            ("search", ""),
            ("sort", "createdAt-desc"),
            ("page", "4"),
        ],
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/list?status=approved&status=pending&minPrice=100"


def test_filter_form_keeps_non_default_sort(console):
    response = console.get("/list/filter", params={"sort": "price-asc"}, follow_redirects=False)
    location = response.headers["location"]
    assert dict(parse_qsl(location.split("?", 1)[1])) == {"sortBy": "price", "sortOrder": "asc"}


def test_reset_redirects_to_bare_list(console):
    response = console.get("/list/reset", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/list"


def test_detail_page(console, backend):
    backend.get("/ads/1").respond(200, json=load_fixture("ads/ad_1.json"))
    response = console.get("/item/1", params={"form": "reject"})
    assert response.status_code == 200
    assert "iPhone 13 Pro 256GB" in response.text
    assert "Анна Смирнова" in response.text
    assert "Запрещённый товар" in response.text


def test_detail_disables_reject_on_rejected_ad(console, backend):
    backend.get("/ads/1").respond(200, json=make_ad(1, status="rejected"))

    page = console.get("/item/1")
    assert "?form=reject" not in page.text
    assert "?form=changes" in page.text

    response = console.get("/item/1", params={"form": "reject"})
    assert response.status_code == 200
    assert 'action="/item/1/reject"' not in response.text


def test_detail_disables_request_changes_on_draft(console, backend):
    backend.get("/ads/1").respond(200, json=make_ad(1, status="draft"))
    response = console.get("/item/1", params={"form": "changes"})
    assert 'action="/item/1/request-changes"' not in response.text
    assert "?form=changes" not in response.text


def test_detail_not_found(console, backend):
    backend.get("/ads/404").respond(404, json={"error": "Объявление не найдено"})
    response = console.get("/item/404")
    assert response.status_code == 404


def test_navigate_from_last_ad_stays(console, backend):
    backend.get("/ads").respond(200, json=ads_page([make_ad(3), make_ad(2), make_ad(1)]))
    response = console.get("/item/1/navigate", params={"offset": 1}, follow_redirects=False)
    assert response.headers["location"] == "/item/1"

    response = console.get("/item/3/navigate", params={"offset": 1}, follow_redirects=False)
    assert response.headers["location"] == "/item/2"


def test_navigate_to_ad_zero(console, backend):
    backend.get("/ads").respond(200, json=ads_page([make_ad(1), make_ad(0)]))
    response = console.get("/item/1/navigate", params={"offset": 1}, follow_redirects=False)
    assert response.headers["location"] == "/item/0"


def test_reject_without_reason_shows_alert(console, backend):
    reject = backend.post("/ads/1/reject").respond(200)
    backend.get("/ads/1").respond(200, json=load_fixture("ads/ad_1.json"))

    response = console.post("/item/1/reject", data={"comment": "без причины"})

    assert response.status_code == 422
    assert "Укажите причину отклонения!" in response.text
    assert not reject.called


def test_reject_with_other_reason(console, backend):
    reject = backend.post("/ads/1/reject").respond(200, json={"message": "ok"})
    backend.get("/ads/1").respond(200, json=make_ad(1, status="rejected"))

    response = console.post(
        "/item/1/reject",
        data={"reasons": ["Неверная категория", "Другое"], "other_reason": "Дубликат", "comment": ""},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/item/1"
    assert json.loads(reject.calls.last.request.content) == {"reason": "Дубликат", "comment": ""}


def test_failed_submission_keeps_entered_form(console, backend):
    backend.post("/ads/1/request-changes").mock(side_effect=httpx.ConnectError("down"))
    backend.get("/ads/1").respond(200, json=load_fixture("ads/ad_1.json"))

    response = console.post(
        "/item/1/request-changes",
        data={"reasons": ["Другое"], "other_reason": "Добавьте фото коробки", "comment": "Срочно"},
    )

    assert response.status_code == 502
    assert "Не удалось отправить решение" in response.text
    assert 'action="/item/1/request-changes"' in response.text
    assert 'value="Другое" checked' in response.text
    assert 'value="Добавьте фото коробки"' in response.text
    assert ">Срочно</textarea>" in response.text


def test_unknown_reason_is_rejected(console, backend):
    response = console.post("/item/1/request-changes", data={"reasons": ["Запрещённый товар"]})
    assert response.status_code == 400


def test_approve_redirects(console, backend):
    approve = backend.post("/ads/1/approve").respond(200, json={"status": "approved"})
    backend.get("/ads/1").respond(200, json=make_ad(1, status="approved"))
    response = console.post("/item/1/approve", follow_redirects=False)
    assert response.status_code == 303
    assert approve.called


def _mock_stats(backend, decisions=None):
    backend.get("/stats/summary").respond(200, json=load_fixture("stats/summary.json"))
    backend.get("/stats/chart/activity").respond(200, json=load_fixture("stats/activity.json"))
    backend.get("/stats/chart/decisions").respond(200, json=decisions or load_fixture("stats/decisions.json"))
    backend.get("/stats/chart/categories").respond(200, json=load_fixture("stats/categories.json"))


def test_stats_page(console, backend):
    _mock_stats(backend)
    response = console.get("/stats", params={"period": "month"})
    assert response.status_code == 200
    assert "Всего проверено: 120" in response.text
    assert response.text.index("Электроника") < response.text.index("Транспорт") < response.text.index("Недвижимость")
    assert "/stats/decisions.png?period=month" in response.text


def test_stats_rejects_unknown_period(console):
    assert console.get("/stats", params={"period": "year"}).status_code == 422


def test_decisions_chart_png(console, backend):
    _mock_stats(backend)
    response = console.get("/stats/decisions.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"


def test_decisions_chart_empty(console, backend):
    _mock_stats(backend, decisions={"approved": 0, "rejected": 0, "requestChanges": 0})
    assert console.get("/stats/decisions.png").status_code == 204
