"""Application service: the session's course catalog.

The catalog is fetched in one call and replaced wholesale. A failed refresh
leaves the previous snapshot in place, and a refresh that resolves after a
newer one has already been applied is discarded.
"""

from __future__ import annotations

import logging

from coursecart.application.dto import ActionResult, ResultCode
from coursecart.application.failures import report_api_failure
from coursecart.application.notifier import Notifier
from coursecart.application.sequencing import RequestSequencer
from coursecart.domain.exceptions import ApiError
from coursecart.domain.model.course import Category, CourseSummary
from coursecart.domain.repository.marketplace_gateway import MarketplaceGateway
from coursecart.domain.service import course_metrics

logger = logging.getLogger(__name__)


class CatalogCache:

    def __init__(
        self,
        gateway: MarketplaceGateway,
        notifier: Notifier,
        max_duration_weeks: int = course_metrics.DEFAULT_MAX_WEEKS,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._max_duration_weeks = max_duration_weeks
        self._sequencer = RequestSequencer()
        self._courses: tuple[CourseSummary, ...] = ()
        self._by_id: dict[str, CourseSummary] = {}
        self.loaded = False

    # --- Queries --------------------------------------------------------------

    @property
    def courses(self) -> tuple[CourseSummary, ...]:
        return self._courses

    def get(self, course_id: str) -> CourseSummary | None:
        return self._by_id.get(course_id)

    def rating(self, course: CourseSummary) -> float:
        return course_metrics.rating(course)

    def duration_weeks(self, course: CourseSummary) -> int:
        return course_metrics.duration_weeks(course, self._max_duration_weeks)

    def course_duration(self, course: CourseSummary) -> str:
        return course_metrics.course_duration(course)

    def lecture_count(self, course: CourseSummary) -> int:
        return course_metrics.lecture_count(course)

    # --- Commands -------------------------------------------------------------

    async def refresh(self) -> ActionResult:
        ticket = self._sequencer.issue()
        try:
            courses = await self._gateway.fetch_all_courses()
        except ApiError as exc:
            if self._sequencer.is_stale(ticket):
                return _superseded()
            return report_api_failure(self._notifier, "Loading courses", exc)

        if not self._sequencer.try_apply(ticket):
            logger.debug("Discarding superseded catalog response #%d", ticket)
            return _superseded()

        self._courses = tuple(courses)
        self._by_id = {course.id: course for course in self._courses}
        self.loaded = True
        logger.info("Catalog refreshed with %d courses", len(self._courses))
        return ActionResult.ok()

    async def fetch_categories(self, with_courses: bool = False) -> list[Category]:
        """Read categories straight from the server (not cached)."""
        try:
            if with_courses:
                return await self._gateway.fetch_categories_with_courses()
            return await self._gateway.fetch_categories()
        except ApiError as exc:
            report_api_failure(self._notifier, "Loading categories", exc)
            return []


def _superseded() -> ActionResult:
    return ActionResult.failed("A newer catalog was already loaded", ResultCode.SUPERSEDED)
