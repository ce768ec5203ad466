"""Abstract gateway to the remote marketplace API (the system of record).

Every method is a network round trip. Implementations raise ApiError (or
its AuthenticationError / NotFoundError subclasses) on failure and return
domain objects on success.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from coursecart.domain.model.course import Category, CourseSummary
from coursecart.domain.model.dashboard import EducatorDashboardSnapshot
from coursecart.domain.model.purchase import CheckoutSession, PendingPurchaseRecord
from coursecart.domain.model.user import UserProfile


class MarketplaceGateway(ABC):

    # --- Catalog (public) -----------------------------------------------------

    @abstractmethod
    async def fetch_all_courses(self) -> list[CourseSummary]:
        """GET /api/course/all"""

    @abstractmethod
    async def fetch_course(self, course_id: str) -> CourseSummary:
        """GET /api/course/:id — raises NotFoundError for deleted courses."""

    @abstractmethod
    async def fetch_categories(self) -> list[Category]:
        """GET /api/category"""

    @abstractmethod
    async def fetch_categories_with_courses(self) -> list[Category]:
        """GET /api/category/with-courses"""

    # --- User -----------------------------------------------------------------

    @abstractmethod
    async def fetch_profile(self) -> UserProfile:
        """GET /api/user/profile"""

    @abstractmethod
    async def fetch_enrolled_courses(self) -> list[CourseSummary]:
        """GET /api/user/enrolled-courses"""

    # --- Purchases ------------------------------------------------------------

    @abstractmethod
    async def purchase_course(self, course_id: str) -> CheckoutSession:
        """POST /api/user/purchase"""

    @abstractmethod
    async def purchase_cart(self, course_ids: list[str]) -> CheckoutSession:
        """POST /api/user/purchase-cart"""

    @abstractmethod
    async def fetch_purchases(self) -> list[PendingPurchaseRecord]:
        """GET /api/user/purchases"""

    @abstractmethod
    async def fetch_pending_count(self) -> int:
        """GET /api/user/pending-purchases-count"""

    @abstractmethod
    async def retry_payment(self, purchase_id: str) -> CheckoutSession:
        """POST /api/user/retry-payment/:purchaseId"""

    @abstractmethod
    async def cancel_payment(self, purchase_id: str) -> None:
        """POST /api/user/cancel-payment/:purchaseId"""

    # --- Educator -------------------------------------------------------------

    @abstractmethod
    async def fetch_educator_dashboard(self) -> EducatorDashboardSnapshot:
        """GET /api/educator/me — raises NotFoundError for a new educator."""

    @abstractmethod
    async def sync_educator_dashboard(self) -> EducatorDashboardSnapshot:
        """PATCH /api/educator/update-dashboard (server recomputes and persists)."""

    @abstractmethod
    async def toggle_publication(self, course_id: str) -> bool | None:
        """PATCH /api/educator/toggle-publication/:courseId

        Returns the new publish flag when the server reports it.
        """
