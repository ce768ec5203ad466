"""Application service: the signed-in session.

Owns who the user is, which courses they already own and whether they are
an educator, and runs the network-backed start-up sequence exactly once per
login:

    profile -> enrolled courses -> dashboard -> pending purchases -> sync

The once-only flag is raised *before* the first await, so a second trigger
arriving while the sequence is still in flight is ignored rather than
queued. Only ``sign_out()`` lowers it again.
"""

from __future__ import annotations

import logging

from coursecart.application.dto import ActionResult, ResultCode
from coursecart.application.educator_dashboard import EducatorDashboardCache
from coursecart.application.failures import report_api_failure
from coursecart.application.notifier import Notifier
from coursecart.application.pending_purchases import PendingPurchaseReconciler
from coursecart.domain.exceptions import ApiError
from coursecart.domain.model.role import RoleResolver
from coursecart.domain.model.user import Identity, UserProfile
from coursecart.domain.repository.marketplace_gateway import MarketplaceGateway

logger = logging.getLogger(__name__)


class CommerceSession:

    def __init__(
        self,
        gateway: MarketplaceGateway,
        notifier: Notifier,
        role: RoleResolver,
        dashboard: EducatorDashboardCache,
        pending: PendingPurchaseReconciler,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self.role = role
        self.dashboard = dashboard
        self.pending = pending
        self.identity: Identity | None = None
        self.profile: UserProfile | None = None
        self.enrolled_course_ids: frozenset[str] = frozenset()
        self._initialized = False
        self._generation = 0

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None and bool(self.identity.token)

    @property
    def is_educator(self) -> bool:
        return self.role.is_educator

    @property
    def token(self) -> str | None:
        return self.identity.token if self.identity else None

    def owns(self, course_id: str) -> bool:
        return course_id in self.enrolled_course_ids

    async def sign_in(self, identity: Identity) -> bool:
        """Handle "identity became available"; safe to call repeatedly."""
        if self._initialized:
            logger.debug("Session already initialised, ignoring trigger")
            return False
        self.attach_identity(identity)
        return await self.initialize()

    def attach_identity(self, identity: Identity) -> None:
        """Record who is signed in without running the start-up sequence."""
        self.identity = identity
        self.role.observe_provider_role(identity.role)

    async def initialize(self) -> bool:
        """Run the start-up sequence; returns False if it already ran.

        A ``sign_out()`` while the sequence is in flight abandons it: the
        remaining steps are skipped and late responses are not applied.
        """
        if self._initialized:
            logger.debug("Session already initialised, ignoring trigger")
            return False
        self._initialized = True
        generation = self._generation

        steps = (
            self._load_profile,
            self.refresh_enrollments,
            self.dashboard.fetch,
            self.pending.list,
            self.pending.count,
            self._sync_if_teaching,
        )
        for step in steps:
            if generation != self._generation:
                logger.debug("Signed out during start-up, abandoning sequence")
                return False
            await step()

        if generation != self._generation:
            return False
        logger.info(
            "Session initialised (role=%s, enrolled=%d)",
            self.role.state.value,
            len(self.enrolled_course_ids),
        )
        return True

    async def refresh_enrollments(self) -> ActionResult:
        generation = self._generation
        try:
            courses = await self._gateway.fetch_enrolled_courses()
        except ApiError as exc:
            if generation != self._generation:
                return _signed_out()
            return report_api_failure(self._notifier, "Loading enrolled courses", exc)
        if generation != self._generation:
            return _signed_out()
        self.enrolled_course_ids = frozenset(course.id for course in courses)
        return ActionResult.ok()

    def sign_out(self) -> None:
        """Forget everything tied to the signed-in user.

        The cart is client-owned and survives sign-out.
        """
        self.identity = None
        self.profile = None
        self.enrolled_course_ids = frozenset()
        self.role.reset()
        self.dashboard.reset()
        self.pending.reset()
        self._initialized = False
        self._generation += 1
        logger.info("Session reset")
        self._notifier.info("Signed out")

    # --- Internal helpers -----------------------------------------------------

    async def _load_profile(self) -> None:
        generation = self._generation
        try:
            profile = await self._gateway.fetch_profile()
        except ApiError as exc:
            if generation == self._generation:
                report_api_failure(self._notifier, "Loading profile", exc)
            return
        if generation != self._generation:
            logger.debug("Discarding profile of a signed-out session")
            return
        self.profile = profile
        self.enrolled_course_ids = frozenset(profile.enrolled_course_ids)
        self.role.observe_server_flag(profile.is_educator)

    async def _sync_if_teaching(self) -> None:
        fetched = self.dashboard.fetched
        if self.role.is_educator and fetched is not None and fetched.has_courses:
            await self.dashboard.sync()


def _signed_out() -> ActionResult:
    return ActionResult.failed("Signed out while loading", ResultCode.SUPERSEDED)
