"""Turning ApiError into results and notices at component boundaries."""

from __future__ import annotations

import logging

from coursecart.application.dto import ActionResult, ResultCode
from coursecart.application.notifier import Notifier
from coursecart.domain.exceptions import ApiError, AuthenticationError

logger = logging.getLogger(__name__)

SIGN_IN_AGAIN = "Authentication required. Please sign in again."


def report_api_failure(
    notifier: Notifier,
    action: str,
    exc: ApiError,
    quiet_auth: bool = True,
) -> ActionResult:
    """Convert *exc* into a failed ActionResult and tell the user.

    Background fetches pass ``quiet_auth=True``: auth failures are expected
    while browsing signed out, so they halt the fetch without a notice.
    """
    if isinstance(exc, AuthenticationError):
        logger.debug("%s halted, not authenticated: %s", action, exc.message)
        if not quiet_auth:
            notifier.error(SIGN_IN_AGAIN)
        return ActionResult.failed(exc.message, ResultCode.AUTH_REQUIRED)

    logger.warning("%s failed (status=%s): %s", action, exc.status_code, exc.message)
    notifier.error(f"{action} failed: {exc.message}")
    return ActionResult.failed(exc.message, ResultCode.REQUEST_FAILED)
