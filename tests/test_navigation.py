import httpx

from adreview.logic.navigation import AdNavigator
from conftest import ads_page, make_ad


def test_navigate_within_bounds():
    navigator = AdNavigator([30, 20, 10])
    assert navigator.navigate(20, 1) == 10
    assert navigator.navigate(20, -1) == 30
    assert navigator.next(30) == 20
    assert navigator.previous(10) == 20


def test_navigate_past_the_ends_is_a_no_op():
    navigator = AdNavigator([30, 20, 10])
    assert navigator.navigate(10, 1) is None
    assert navigator.navigate(30, -1) is None


def test_unknown_current_ad():
    assert AdNavigator([1, 2]).navigate(99, 1) is None
    assert AdNavigator([]).next(1) is None


async def test_load_uses_backend_order(backend, client):
    backend.get("/ads").respond(200, json=ads_page([make_ad(7), make_ad(3), make_ad(5)]))
    navigator = await AdNavigator.load(client)
    assert navigator.order == [7, 3, 5]
    assert navigator.next(3) == 5


async def test_load_failure_gives_empty_order(backend, client):
    backend.get("/ads").mock(side_effect=httpx.ReadTimeout("timeout"))
    navigator = await AdNavigator.load(client)
    assert navigator.order == []
