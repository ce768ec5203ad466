"""Tests for the catalog cache."""

import asyncio

from coursecart.application.catalog_cache import CatalogCache
from coursecart.application.dto import ResultCode
from coursecart.domain.exceptions import ApiError, AuthenticationError
from coursecart.domain.model.course import Category
from tests.fakes import FakeMarketplaceGateway, RecordingNotifier, make_course


def _setup():
    gateway = FakeMarketplaceGateway()
    notifier = RecordingNotifier()
    return CatalogCache(gateway, notifier), gateway, notifier


def test_refresh_replaces_everything():
    catalog, gateway, _ = _setup()
    gateway.courses = [make_course("a"), make_course("b")]
    asyncio.run(catalog.refresh())

    gateway.courses = [make_course("c")]
    result = asyncio.run(catalog.refresh())

    assert result.success
    assert [c.id for c in catalog.courses] == ["c"]
    assert catalog.get("a") is None
    assert catalog.get("c").id == "c"


def test_failure_keeps_previous_snapshot():
    catalog, gateway, notifier = _setup()
    gateway.courses = [make_course("a")]
    asyncio.run(catalog.refresh())

    gateway.errors["fetch_all_courses"] = ApiError("Internal server error", status_code=500)
    result = asyncio.run(catalog.refresh())

    assert not result.success
    assert result.code is ResultCode.REQUEST_FAILED
    assert [c.id for c in catalog.courses] == ["a"]
    assert notifier.levels() == ["error"]


def test_auth_failure_is_quiet():
    catalog, gateway, notifier = _setup()
    gateway.errors["fetch_all_courses"] = AuthenticationError("nope", status_code=401)
    result = asyncio.run(catalog.refresh())
    assert result.code is ResultCode.AUTH_REQUIRED
    assert notifier.notices == []


class _GatedGateway(FakeMarketplaceGateway):
    """Each catalog fetch waits for its own gate to open."""

    def __init__(self):
        super().__init__()
        self.gates: list[asyncio.Event] = []
        self.responses: list[list] = []

    async def fetch_all_courses(self):
        index = len(self.gates)
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response


def test_superseded_refresh_is_discarded():
    async def scenario():
        gateway = _GatedGateway()
        gateway.responses = [[make_course("old")], [make_course("new")]]
        catalog = CatalogCache(gateway, RecordingNotifier())

        first = asyncio.create_task(catalog.refresh())
        second = asyncio.create_task(catalog.refresh())
        await asyncio.sleep(0)

        gateway.gates[1].set()
        second_result = await second
        gateway.gates[0].set()
        first_result = await first
        return catalog, first_result, second_result

    catalog, first_result, second_result = asyncio.run(scenario())
    assert second_result.success
    assert first_result.code is ResultCode.SUPERSEDED
    assert [c.id for c in catalog.courses] == ["new"]


def test_superseded_failure_is_quiet():
    async def scenario():
        gateway = _GatedGateway()
        gateway.responses = [ApiError("timeout", status_code=504), [make_course("new")]]
        notifier = RecordingNotifier()
        catalog = CatalogCache(gateway, notifier)

        first = asyncio.create_task(catalog.refresh())
        second = asyncio.create_task(catalog.refresh())
        await asyncio.sleep(0)

        gateway.gates[1].set()
        await second
        gateway.gates[0].set()
        return catalog, notifier, await first

    catalog, notifier, first_result = asyncio.run(scenario())
    assert first_result.code is ResultCode.SUPERSEDED
    assert notifier.notices == []
    assert [c.id for c in catalog.courses] == ["new"]


def test_derived_helpers():
    catalog, _, _ = _setup()
    course = make_course("a", rating_samples=(5, 4))
    assert catalog.rating(course) == 4.5
    assert catalog.duration_weeks(course) == 1
    assert catalog.lecture_count(course) == 0


def test_categories_failure_returns_empty():
    catalog, gateway, notifier = _setup()
    gateway.categories = [Category(id="k1", name="Programming")]
    assert [c.name for c in asyncio.run(catalog.fetch_categories())] == ["Programming"]

    gateway.errors["fetch_categories_with_courses"] = ApiError("down", status_code=503)
    assert asyncio.run(catalog.fetch_categories(with_courses=True)) == []
    assert notifier.levels() == ["error"]
