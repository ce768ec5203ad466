"""httpx implementation of MarketplaceGateway."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from coursecart.domain.exceptions import ApiError, AuthenticationError, NotFoundError
from coursecart.domain.model.course import Category, CourseSummary
from coursecart.domain.model.dashboard import EducatorDashboardSnapshot
from coursecart.domain.model.purchase import CheckoutSession, PendingPurchaseRecord
from coursecart.domain.model.user import UserProfile
from coursecart.domain.repository.marketplace_gateway import MarketplaceGateway
from coursecart.infrastructure.http import payloads

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class HttpMarketplaceGateway(MarketplaceGateway):
    """Talks JSON over HTTP to the marketplace API.

    Authenticated calls send ``Authorization: Bearer <token>`` with the token
    returned by *token_provider* at call time; when there is no token the
    call fails with AuthenticationError without touching the network.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpMarketplaceGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- Catalog --------------------------------------------------------------

    async def fetch_all_courses(self) -> list[CourseSummary]:
        body = await self._request("GET", "/api/course/all", auth=False)
        return payloads.courses_from_json(body.get("courses"))

    async def fetch_course(self, course_id: str) -> CourseSummary:
        body = await self._request("GET", f"/api/course/{course_id}", auth=False)
        course = body.get("course")
        if not isinstance(course, dict):
            raise NotFoundError("Course not found", status_code=404)
        return payloads.course_from_json(course)

    async def fetch_categories(self) -> list[Category]:
        body = await self._request("GET", "/api/category", auth=False)
        return payloads.categories_from_json(body.get("categories"))

    async def fetch_categories_with_courses(self) -> list[Category]:
        body = await self._request("GET", "/api/category/with-courses", auth=False)
        return payloads.categories_from_json(body.get("categories"))

    # --- User -----------------------------------------------------------------

    async def fetch_profile(self) -> UserProfile:
        body = await self._request("GET", "/api/user/profile")
        user = body.get("user")
        if not isinstance(user, dict):
            raise ApiError("Profile missing from response")
        return payloads.profile_from_json(user)

    async def fetch_enrolled_courses(self) -> list[CourseSummary]:
        body = await self._request("GET", "/api/user/enrolled-courses")
        return payloads.courses_from_json(body.get("courses"))

    # --- Purchases ------------------------------------------------------------

    async def purchase_course(self, course_id: str) -> CheckoutSession:
        body = await self._request("POST", "/api/user/purchase", json={"courseId": course_id})
        return payloads.checkout_from_json(body)

    async def purchase_cart(self, course_ids: list[str]) -> CheckoutSession:
        body = await self._request(
            "POST", "/api/user/purchase-cart", json={"courseIds": list(course_ids)}
        )
        return payloads.checkout_from_json(body)

    async def fetch_purchases(self) -> list[PendingPurchaseRecord]:
        body = await self._request("GET", "/api/user/purchases")
        return payloads.purchases_from_json(body.get("purchases", body.get("data")))

    async def fetch_pending_count(self) -> int:
        body = await self._request("GET", "/api/user/pending-purchases-count")
        return payloads.lenient_int(body.get("count", body.get("pendingCount")))

    async def retry_payment(self, purchase_id: str) -> CheckoutSession:
        body = await self._request("POST", f"/api/user/retry-payment/{purchase_id}", json={})
        return payloads.checkout_from_json(body)

    async def cancel_payment(self, purchase_id: str) -> None:
        await self._request("POST", f"/api/user/cancel-payment/{purchase_id}", json={})

    # --- Educator -------------------------------------------------------------

    async def fetch_educator_dashboard(self) -> EducatorDashboardSnapshot:
        body = await self._request("GET", "/api/educator/me")
        return payloads.dashboard_from_json(_data(body))

    async def sync_educator_dashboard(self) -> EducatorDashboardSnapshot:
        body = await self._request("PATCH", "/api/educator/update-dashboard")
        return payloads.dashboard_from_json(_data(body))

    async def toggle_publication(self, course_id: str) -> bool | None:
        body = await self._request("PATCH", f"/api/educator/toggle-publication/{course_id}")
        course = body.get("course")
        flag = course.get("isPublished") if isinstance(course, dict) else body.get("isPublished")
        return flag if isinstance(flag, bool) else None

    # --- Transport ------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        auth: bool = True,
        json: Any = None,
    ) -> dict:
        headers = {}
        if auth:
            token = self._token_provider()
            if not token:
                raise AuthenticationError("User authentication required", status_code=401)
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.RequestError as exc:
            raise ApiError(f"Network error: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None
        logger.debug("%s %s -> %d", method, path, response.status_code)

        if not response.is_success:
            raise _error_for(response, body)
        if not isinstance(body, dict):
            raise ApiError("Unexpected response from server", status_code=response.status_code)
        if body.get("success") is False:
            raise ApiError(
                _message(body) or "Request failed",
                status_code=response.status_code,
                code=body.get("code"),
            )
        return body


def _data(body: dict) -> dict:
    data = body.get("data", body)
    return data if isinstance(data, dict) else {}


def _message(body: object) -> str | None:
    if not isinstance(body, dict):
        return None
    message = body.get("error") or body.get("message")
    return str(message) if message else None


def _error_for(response: httpx.Response, body: object) -> ApiError:
    status = response.status_code
    message = _message(body) or response.reason_phrase or f"HTTP {status}"
    code = body.get("code") if isinstance(body, dict) else None
    if status in (401, 403):
        return AuthenticationError(message, status_code=status, code=code)
    if status == 404:
        return NotFoundError(message, status_code=status, code=code)
    return ApiError(message, status_code=status, code=code)
