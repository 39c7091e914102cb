import copy
import json
from pathlib import Path

import pytest
import respx

from adreview.client.api import ModerationClient

BASE_URL = "http://backend.test/api/v1"
FIXTURES = Path(__file__).parent / "fixtures" / "http"


def load_fixture(path: str):
    return json.loads((FIXTURES / path).read_text(encoding="utf-8"))


def make_ad(ad_id: int, **overrides) -> dict:
    ad = copy.deepcopy(load_fixture("ads/ad_1.json"))
    ad["id"] = ad_id
    ad["title"] = f"Объявление {ad_id}"
    ad.update(overrides)
    return ad


def ads_page(ads: list[dict], *, current_page: int = 1, total_pages: int = 1, limit: int = 10) -> dict:
    return {
        "ads": ads,
        "pagination": {
            "currentPage": current_page,
            "totalPages": total_pages,
            "totalItems": len(ads) if total_pages == 1 else total_pages * limit,
            "itemsPerPage": limit,
        },
    }


@pytest.fixture()
def backend():
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        yield router


@pytest.fixture()
async def client(backend):
    client = ModerationClient(BASE_URL)
    yield client
    await client.close()
