"""Application service: reconciling unsettled purchases.

A purchase is created server-side as soon as a checkout session exists, and
stays pending until the payment provider confirms it. This component lists
the unsettled ones with live course detail and lets the user retry or
cancel them. It never changes a purchase status locally.
"""

from __future__ import annotations

import asyncio
import logging

from coursecart.application.dto import ActionResult, CheckoutResult, ResultCode
from coursecart.application.failures import report_api_failure
from coursecart.application.notifier import Notifier
from coursecart.application.sequencing import RequestSequencer
from coursecart.domain.exceptions import ApiError, NotFoundError
from coursecart.domain.model.purchase import (
    CourseDetail,
    PendingPurchaseRecord,
    PlaceholderReason,
)
from coursecart.domain.repository.marketplace_gateway import MarketplaceGateway

logger = logging.getLogger(__name__)


class PendingPurchaseReconciler:

    def __init__(self, gateway: MarketplaceGateway, notifier: Notifier) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._list_sequencer = RequestSequencer()
        self._count_sequencer = RequestSequencer()
        self.records: tuple[PendingPurchaseRecord, ...] = ()
        self.pending_count: int | None = None

    async def list(self) -> ActionResult:
        """Fetch, filter and hydrate unsettled purchases.

        ``records`` is replaced in one step after every course lookup has
        settled, so readers never see a half-hydrated list.
        """
        ticket = self._list_sequencer.issue()
        try:
            purchases = await self._gateway.fetch_purchases()
        except ApiError as exc:
            if self._list_sequencer.is_stale(ticket):
                return _superseded()
            return report_api_failure(self._notifier, "Loading pending purchases", exc)

        unsettled = [p for p in purchases if p.is_unsettled and p.course_id]
        hydrated = await asyncio.gather(*(self._hydrate(p) for p in unsettled))

        if not self._list_sequencer.try_apply(ticket):
            logger.debug("Discarding superseded purchases response #%d", ticket)
            return _superseded()

        self.records = tuple(hydrated)
        return ActionResult.ok()

    async def count(self) -> ActionResult:
        """Refresh the badge count; independent of ``records``."""
        ticket = self._count_sequencer.issue()
        try:
            count = await self._gateway.fetch_pending_count()
        except ApiError as exc:
            if self._count_sequencer.is_stale(ticket):
                return _superseded()
            return report_api_failure(self._notifier, "Loading pending count", exc)

        if not self._count_sequencer.try_apply(ticket):
            return _superseded()
        self.pending_count = count
        return ActionResult.ok()

    async def retry(self, purchase_id: str) -> CheckoutResult:
        """Open a fresh checkout session for an unsettled purchase.

        ``records`` is left alone; the next ``list()`` shows the new state
        once the provider confirms.
        """
        try:
            session = await self._gateway.retry_payment(purchase_id)
        except ApiError as exc:
            result = report_api_failure(
                self._notifier, "Retrying payment", exc, quiet_auth=False
            )
            return CheckoutResult.failed(result.error, result.code)

        self._notifier.success("Payment session created! Redirecting to checkout...")
        return CheckoutResult(success=True, session_url=session.session_url)

    async def cancel(self, purchase_id: str) -> ActionResult:
        try:
            await self._gateway.cancel_payment(purchase_id)
        except ApiError as exc:
            return report_api_failure(
                self._notifier, "Cancelling purchase", exc, quiet_auth=False
            )

        self._notifier.success("Purchase cancelled successfully")
        await self.list()
        return ActionResult.ok()

    def reset(self) -> None:
        self._list_sequencer.invalidate()
        self._count_sequencer.invalidate()
        self.records = ()
        self.pending_count = None

    # --- Internal helpers -----------------------------------------------------

    async def _hydrate(self, purchase: PendingPurchaseRecord) -> PendingPurchaseRecord:
        course_id = purchase.course_id
        try:
            course = await self._gateway.fetch_course(course_id)
        except NotFoundError:
            logger.warning("Purchase %s references missing course %s", purchase.id, course_id)
            reason = PlaceholderReason.NOT_FOUND
        except ApiError as exc:
            logger.warning(
                "Course %s for purchase %s unavailable: %s", course_id, purchase.id, exc
            )
            reason = PlaceholderReason.UNAVAILABLE
        else:
            return purchase.hydrated(CourseDetail.from_course(course))
        return purchase.hydrated(CourseDetail.placeholder(course_id, purchase.amount, reason))


def _superseded() -> ActionResult:
    return ActionResult.failed(
        "A newer purchase list was already loaded", ResultCode.SUPERSEDED
    )
