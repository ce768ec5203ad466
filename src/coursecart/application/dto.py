"""Data Transfer Objects — results returned by application components.

Failures that are part of normal business (already in cart, pending
purchase, network hiccup) are reported through these results instead of
being raised, so callers never have to guard against exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResultCode(Enum):
    ALREADY_IN_CART = "ALREADY_IN_CART"
    ALREADY_ENROLLED = "ALREADY_ENROLLED"
    PENDING_PURCHASE = "PENDING_PURCHASE"
    EMPTY_CART = "EMPTY_CART"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    NOT_EDUCATOR = "NOT_EDUCATOR"
    NOTHING_TO_SYNC = "NOTHING_TO_SYNC"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    REQUEST_FAILED = "REQUEST_FAILED"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    SUPERSEDED = "SUPERSEDED"


@dataclass(frozen=True)
class ActionResult:
    success: bool
    error: str | None = None
    code: ResultCode | None = None

    @staticmethod
    def ok() -> ActionResult:
        return ActionResult(success=True)

    @staticmethod
    def failed(error: str, code: ResultCode = ResultCode.REQUEST_FAILED) -> ActionResult:
        return ActionResult(success=False, error=error, code=code)


@dataclass(frozen=True)
class CheckoutResult:
    """Outcome of creating a hosted checkout session.

    On success the caller should navigate to ``session_url``.
    """

    success: bool
    session_url: str | None = None
    error: str | None = None
    code: ResultCode | None = None
    total_amount: str | None = None  # formatted, e.g. "$125.00"
    course_count: int | None = None

    @property
    def is_pending_purchase(self) -> bool:
        return self.code is ResultCode.PENDING_PURCHASE

    @staticmethod
    def failed(error: str, code: ResultCode = ResultCode.REQUEST_FAILED) -> CheckoutResult:
        return CheckoutResult(success=False, error=error, code=code)
