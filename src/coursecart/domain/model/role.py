"""Educator role resolution.

Two independent signals say whether the current user is an educator: the
``isEducator`` flag stored on the server-side profile, and the identity
provider's ``publicMetadata.role`` claim. The resolver merges them into one
value so no call site ORs them ad hoc.
"""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)

EDUCATOR_ROLE = "educator"


class RoleState(Enum):
    UNKNOWN = "UNKNOWN"
    STUDENT = "STUDENT"
    EDUCATOR = "EDUCATOR"


class RoleResolver:
    """Three-state resolver with a sticky EDUCATOR state.

    UNKNOWN -> STUDENT     when a signal says "not an educator"
    UNKNOWN|STUDENT -> EDUCATOR  when either signal says "educator"
    EDUCATOR -> EDUCATOR   on any later signal (a lagging server record for a
                           brand-new educator must not demote them)
    * -> UNKNOWN           only via ``reset()`` (logout / session end)
    """

    def __init__(self) -> None:
        self._state = RoleState.UNKNOWN
        self._server_flag: bool | None = None
        self._provider_role: str | None = None

    @property
    def state(self) -> RoleState:
        return self._state

    @property
    def is_educator(self) -> bool:
        return self._state is RoleState.EDUCATOR

    @property
    def is_resolved(self) -> bool:
        return self._state is not RoleState.UNKNOWN

    def observe_server_flag(self, is_educator: bool) -> RoleState:
        self._server_flag = bool(is_educator)
        return self._apply(self._server_flag)

    def observe_provider_role(self, role: str | None) -> RoleState:
        self._provider_role = role
        return self._apply(role == EDUCATOR_ROLE)

    def reset(self) -> None:
        self._state = RoleState.UNKNOWN
        self._server_flag = None
        self._provider_role = None

    # --- Internal helpers -----------------------------------------------------

    def _apply(self, signals_educator: bool) -> RoleState:
        if signals_educator:
            if self._state is not RoleState.EDUCATOR:
                logger.info("Educator role confirmed")
            self._state = RoleState.EDUCATOR
        elif self._state is RoleState.UNKNOWN:
            self._state = RoleState.STUDENT
        return self._state
