"""Pending purchase records and their hydrated course detail.

Purchase status is owned by the server. The client reads it and may ask for
a retry or a cancellation, but never changes it locally.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from coursecart.domain.model.course import CourseSummary
from coursecart.domain.model.value_objects import Money


class PurchaseStatus(Enum):
    PENDING = "pending"
    INCOMPLETE = "incomplete"
    FAILED = "failed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    REFUNDED = "refunded"

    @property
    def is_unsettled(self) -> bool:
        return self in UNSETTLED_STATUSES


UNSETTLED_STATUSES = frozenset(
    {PurchaseStatus.PENDING, PurchaseStatus.INCOMPLETE, PurchaseStatus.FAILED}
)


class PlaceholderReason(Enum):
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


PLACEHOLDER_TITLES = {
    PlaceholderReason.NOT_FOUND: "Course Not Found",
    PlaceholderReason.UNAVAILABLE: "Course Unavailable",
}


@dataclass(frozen=True)
class CourseDetail:
    """Course information shown next to a purchase.

    ``placeholder_reason`` is set when the real course could not be fetched;
    the detail then carries a stand-in title and the purchase amount.
    """

    course_id: str
    title: str
    price: Money
    thumbnail: str = ""
    placeholder_reason: PlaceholderReason | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder_reason is not None

    @staticmethod
    def from_course(course: CourseSummary) -> CourseDetail:
        return CourseDetail(
            course_id=course.id,
            title=course.title,
            price=course.final_price,
            thumbnail=course.thumbnail,
        )

    @staticmethod
    def placeholder(
        course_id: str, amount: Money, reason: PlaceholderReason
    ) -> CourseDetail:
        return CourseDetail(
            course_id=course_id,
            title=PLACEHOLDER_TITLES[reason],
            price=amount,
            placeholder_reason=reason,
        )


@dataclass(frozen=True)
class PendingPurchaseRecord:
    """A purchase as reported by the server.

    ``course_id`` is None when the server record has no usable course
    reference; such records are dropped before hydration.
    """

    id: str
    course_id: str | None
    amount: Money
    status: PurchaseStatus
    created_at: datetime | None = None
    last_updated: datetime | None = None
    course: CourseDetail | None = None

    @property
    def is_unsettled(self) -> bool:
        return self.status.is_unsettled

    def hydrated(self, detail: CourseDetail) -> PendingPurchaseRecord:
        return replace(self, course=detail)


@dataclass(frozen=True)
class CheckoutSession:
    """A hosted checkout session created by the server.

    Nothing is final at this point; the payment provider confirms later.
    """

    session_url: str
    session_id: str | None = None
    total_amount: Money | None = None
    course_count: int | None = None
