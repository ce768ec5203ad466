"""Application service: turning a course or the cart into a checkout session.

Both operations return a CheckoutResult instead of raising; a failed
checkout is an ordinary business outcome. Neither retries automatically,
and callers are expected to block re-submission while a request is in
flight.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from coursecart.application.cart_store import PersistentCartStore
from coursecart.application.dto import CheckoutResult, ResultCode
from coursecart.application.failures import report_api_failure
from coursecart.application.notifier import Notifier
from coursecart.application.session import CommerceSession
from coursecart.domain.exceptions import ApiError
from coursecart.domain.model.cart import CartItem
from coursecart.domain.repository.marketplace_gateway import MarketplaceGateway

logger = logging.getLogger(__name__)

PENDING_PURCHASE_CODE = "PENDING_PURCHASE_EXISTS"
# Older servers only send the message text.
# TODO: drop the message match once every deployment sends PENDING_PURCHASE_EXISTS.
PENDING_PURCHASE_MESSAGE = "You already have a pending purchase for this course."


def is_pending_purchase_error(exc: ApiError) -> bool:
    if exc.code == PENDING_PURCHASE_CODE:
        return True
    return exc.message.strip() == PENDING_PURCHASE_MESSAGE


class PurchaseOrchestrator:

    def __init__(
        self,
        gateway: MarketplaceGateway,
        notifier: Notifier,
        session: CommerceSession,
        cart: PersistentCartStore,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._session = session
        self._cart = cart

    async def purchase_single(self, course_id: str) -> CheckoutResult:
        """Create a checkout session for one course.

        Local cart and enrollment state are left untouched: nothing is
        bought until the payment provider confirms.
        """
        if not self._session.is_authenticated:
            message = "Please sign in to enroll in this course"
            self._notifier.warning(message)
            return CheckoutResult.failed(message, ResultCode.NOT_AUTHENTICATED)

        if self._session.owns(course_id):
            message = "You are already enrolled in this course"
            self._notifier.warning(message)
            return CheckoutResult.failed(message, ResultCode.ALREADY_ENROLLED)

        try:
            session = await self._gateway.purchase_course(course_id)
        except ApiError as exc:
            if is_pending_purchase_error(exc):
                logger.info("Course %s already has a pending purchase", course_id)
                self._notifier.warning(
                    "You have a pending purchase for this course. "
                    "Continue or cancel it from your pending purchases."
                )
                return CheckoutResult.failed(exc.message, ResultCode.PENDING_PURCHASE)
            result = report_api_failure(
                self._notifier, "Starting checkout", exc, quiet_auth=False
            )
            return CheckoutResult.failed(result.error, result.code)

        self._notifier.info("Redirecting to payment...")
        return CheckoutResult(success=True, session_url=session.session_url)

    async def purchase_cart(
        self, items: Sequence[CartItem] | None = None
    ) -> CheckoutResult:
        """Create one checkout session covering every course in the cart.

        On success the cart is cleared right away; on failure it is kept so
        the user can try again.
        """
        items = list(self._cart.items if items is None else items)
        if not items:
            message = "Your cart is empty!"
            self._notifier.error(message)
            return CheckoutResult.failed(message, ResultCode.EMPTY_CART)

        if not self._session.is_authenticated:
            message = "Please sign in to continue with checkout"
            self._notifier.warning(message)
            return CheckoutResult.failed(message, ResultCode.NOT_AUTHENTICATED)

        course_ids = [item.course_id for item in items]
        try:
            session = await self._gateway.purchase_cart(course_ids)
        except ApiError as exc:
            result = report_api_failure(
                self._notifier, "Creating checkout session", exc, quiet_auth=False
            )
            return CheckoutResult.failed(result.error, result.code)

        self._cart.clear(announce=False)
        count = session.course_count if session.course_count is not None else len(course_ids)
        logger.info("Cart checkout session created for %d courses", count)
        self._notifier.success(
            f"Redirecting to secure checkout for {count} course{'s' if count != 1 else ''}..."
        )
        return CheckoutResult(
            success=True,
            session_url=session.session_url,
            total_amount=(
                str(session.total_amount) if session.total_amount is not None else None
            ),
            course_count=count,
        )
