"""Application service: cached educator dashboard.

Two snapshot slots are kept apart on purpose:

- ``fetched`` is what ``GET /api/educator/me`` reported passively.
- ``synced`` is what the server returned after an explicit
  recompute-and-persist request.

Neither is ever patched locally; the server is the only place totals are
computed.
"""

from __future__ import annotations

import logging

from coursecart.application.dto import ActionResult, ResultCode
from coursecart.application.failures import report_api_failure
from coursecart.application.notifier import Notifier
from coursecart.application.sequencing import RequestSequencer
from coursecart.domain.exceptions import ApiError, NotFoundError
from coursecart.domain.model.dashboard import (
    EducatorDashboardSnapshot,
    EnrolledStudent,
    flatten_roster,
)
from coursecart.domain.model.role import RoleResolver
from coursecart.domain.repository.marketplace_gateway import MarketplaceGateway

logger = logging.getLogger(__name__)

_NOT_EDUCATOR = "Educator access required"


class EducatorDashboardCache:

    def __init__(
        self,
        gateway: MarketplaceGateway,
        notifier: Notifier,
        role: RoleResolver,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._role = role
        self._sequencer = RequestSequencer()
        self._sync_sequencer = RequestSequencer()
        self.fetched: EducatorDashboardSnapshot | None = None
        self.synced: EducatorDashboardSnapshot | None = None
        self.last_error: str | None = None
        self._roster: list[EnrolledStudent] = []
        self._roster_course_count: int | None = None

    # --- Queries --------------------------------------------------------------

    @property
    def roster(self) -> list[EnrolledStudent]:
        """Enrolled students across all courses, newest first.

        Rebuilt only when the number of courses in the fetched snapshot
        changes, since the snapshot is replaced wholesale on every fetch.
        """
        courses = self.fetched.published_courses if self.fetched else ()
        if len(courses) != self._roster_course_count:
            self._roster = flatten_roster(courses)
            self._roster_course_count = len(courses)
        return list(self._roster)

    # --- Commands -------------------------------------------------------------

    async def fetch(self) -> ActionResult:
        if not self._role.is_educator:
            return ActionResult.failed(_NOT_EDUCATOR, ResultCode.NOT_EDUCATOR)

        ticket = self._sequencer.issue()
        try:
            snapshot = await self._gateway.fetch_educator_dashboard()
        except NotFoundError:
            logger.info("No educator record yet, using an empty dashboard")
            snapshot = EducatorDashboardSnapshot.empty()
        except ApiError as exc:
            if self._sequencer.is_stale(ticket):
                return _superseded()
            result = report_api_failure(self._notifier, "Loading dashboard", exc)
            self.last_error = result.error
            return result

        if not self._sequencer.try_apply(ticket):
            logger.debug("Discarding superseded dashboard response #%d", ticket)
            return _superseded()

        self.fetched = snapshot
        self.last_error = None
        return ActionResult.ok()

    async def sync(self) -> ActionResult:
        """Ask the server to recompute and persist the dashboard totals."""
        if not self._role.is_educator:
            return ActionResult.failed(_NOT_EDUCATOR, ResultCode.NOT_EDUCATOR)
        if self.fetched is None or not self.fetched.has_courses:
            message = "No courses to sync yet"
            self._notifier.info(message)
            return ActionResult.failed(message, ResultCode.NOTHING_TO_SYNC)

        ticket = self._sync_sequencer.issue()
        try:
            snapshot = await self._gateway.sync_educator_dashboard()
        except ApiError as exc:
            if self._sync_sequencer.is_stale(ticket):
                return _superseded()
            return report_api_failure(self._notifier, "Syncing dashboard", exc)

        if not self._sync_sequencer.try_apply(ticket):
            logger.debug("Discarding superseded sync response #%d", ticket)
            return _superseded()

        self.synced = snapshot
        logger.info(
            "Dashboard synced: %d courses, %d enrollments",
            snapshot.total_courses,
            snapshot.total_enrollments,
        )
        self._notifier.success("Dashboard updated")
        return ActionResult.ok()

    async def toggle_publication(self, course_id: str) -> ActionResult:
        if not self._role.is_educator:
            self._notifier.error(_NOT_EDUCATOR)
            return ActionResult.failed(_NOT_EDUCATOR, ResultCode.NOT_EDUCATOR)

        try:
            published = await self._gateway.toggle_publication(course_id)
        except ApiError as exc:
            return report_api_failure(self._notifier, "Changing publication", exc)

        if published is None:
            self._notifier.success("Course publication updated")
        elif published:
            self._notifier.success("Course published")
        else:
            self._notifier.success("Course unpublished")

        # Publish state changes the aggregates, so rehydrate them from the server.
        await self.fetch()
        return ActionResult.ok()

    def reset(self) -> None:
        self._sequencer.invalidate()
        self._sync_sequencer.invalidate()
        self.fetched = None
        self.synced = None
        self.last_error = None
        self._roster = []
        self._roster_course_count = None


def _superseded() -> ActionResult:
    return ActionResult.failed("A newer dashboard was already loaded", ResultCode.SUPERSEDED)
