"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repository and
the HTTP gateway but keep everything in memory. No file or network I/O.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from decimal import Decimal

from coursecart.application.notifier import Notifier
from coursecart.domain.exceptions import NotFoundError, StorageError
from coursecart.domain.model.cart import CartItem
from coursecart.domain.model.course import Category, CourseSummary
from coursecart.domain.model.dashboard import EducatorDashboardSnapshot
from coursecart.domain.model.purchase import CheckoutSession, PendingPurchaseRecord
from coursecart.domain.model.user import UserProfile
from coursecart.domain.model.value_objects import Money
from coursecart.domain.repository.cart_repository import CartRepository
from coursecart.domain.repository.marketplace_gateway import MarketplaceGateway


def make_course(
    course_id: str = "c1",
    title: str | None = None,
    price: str = "100",
    offer: str = "0",
    discount: str = "0",
    **kwargs,
) -> CourseSummary:
    return CourseSummary(
        id=course_id,
        title=title or f"Course {course_id}",
        price=Money.of(price),
        offer_price=Money.of(offer),
        discount=Decimal(discount),
        **kwargs,
    )


class FakeCartRepository(CartRepository):

    def __init__(self, items: list[CartItem] | None = None) -> None:
        self.stored: list[CartItem] = list(items or [])
        self.saves = 0
        self.fail_writes = False

    def load(self) -> list[CartItem]:
        return list(self.stored)

    def save(self, items: list[CartItem]) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        self.saves += 1
        self.stored = list(items)


class RecordingNotifier(Notifier):

    def __init__(self) -> None:
        self.notices: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.notices.append(("success", message))

    def info(self, message: str) -> None:
        self.notices.append(("info", message))

    def warning(self, message: str) -> None:
        self.notices.append(("warning", message))

    def error(self, message: str) -> None:
        self.notices.append(("error", message))

    def levels(self) -> list[str]:
        return [level for level, _ in self.notices]


class FakeMarketplaceGateway(MarketplaceGateway):
    """Scriptable gateway.

    Set the public attributes to control responses. ``errors`` maps a
    method name to an exception raised on every call of that method.
    Every call yields to the event loop once, like a real network call.
    """

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.errors: dict[str, Exception] = {}
        self.courses: list[CourseSummary] = []
        self.course_details: dict[str, CourseSummary] = {}
        self.course_errors: dict[str, Exception] = {}
        self.categories: list[Category] = []
        self.profile = UserProfile(id="u1", username="student")
        self.enrolled: list[CourseSummary] = []
        self.checkout = CheckoutSession(session_url="https://checkout.test/s/1")
        self.cart_course_ids: list[list[str]] = []
        self.purchases: list[PendingPurchaseRecord] = []
        self.pending_count = 0
        self.dashboard = EducatorDashboardSnapshot.empty()
        self.synced_dashboard = EducatorDashboardSnapshot.empty()
        self.published: bool | None = True

    async def _call(self, name: str) -> None:
        self.calls[name] += 1
        await asyncio.sleep(0)
        if name in self.errors:
            raise self.errors[name]

    async def fetch_all_courses(self) -> list[CourseSummary]:
        await self._call("fetch_all_courses")
        return list(self.courses)

    async def fetch_course(self, course_id: str) -> CourseSummary:
        await self._call("fetch_course")
        if course_id in self.course_errors:
            raise self.course_errors[course_id]
        if course_id not in self.course_details:
            raise NotFoundError("Course not found or not published", status_code=404)
        return self.course_details[course_id]

    async def fetch_categories(self) -> list[Category]:
        await self._call("fetch_categories")
        return list(self.categories)

    async def fetch_categories_with_courses(self) -> list[Category]:
        await self._call("fetch_categories_with_courses")
        return list(self.categories)

    async def fetch_profile(self) -> UserProfile:
        await self._call("fetch_profile")
        return self.profile

    async def fetch_enrolled_courses(self) -> list[CourseSummary]:
        await self._call("fetch_enrolled_courses")
        return list(self.enrolled)

    async def purchase_course(self, course_id: str) -> CheckoutSession:
        await self._call("purchase_course")
        return self.checkout

    async def purchase_cart(self, course_ids: list[str]) -> CheckoutSession:
        await self._call("purchase_cart")
        self.cart_course_ids.append(list(course_ids))
        return self.checkout

    async def fetch_purchases(self) -> list[PendingPurchaseRecord]:
        await self._call("fetch_purchases")
        return list(self.purchases)

    async def fetch_pending_count(self) -> int:
        await self._call("fetch_pending_count")
        return self.pending_count

    async def retry_payment(self, purchase_id: str) -> CheckoutSession:
        await self._call("retry_payment")
        return self.checkout

    async def cancel_payment(self, purchase_id: str) -> None:
        await self._call("cancel_payment")

    async def fetch_educator_dashboard(self) -> EducatorDashboardSnapshot:
        await self._call("fetch_educator_dashboard")
        return self.dashboard

    async def sync_educator_dashboard(self) -> EducatorDashboardSnapshot:
        await self._call("sync_educator_dashboard")
        return self.synced_dashboard

    async def toggle_publication(self, course_id: str) -> bool | None:
        await self._call("toggle_publication")
        return self.published

    async def aclose(self) -> None:
        self.calls["aclose"] += 1
