"""Mapping between the marketplace API's JSON and domain objects.

The API is loose about types (numbers as strings, references that are
either an id or a populated document), so every reader here is lenient:
missing or malformed numbers become 0 and malformed list entries are
skipped.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from coursecart.domain.exceptions import ApiError
from coursecart.domain.model.course import Category, Chapter, CourseSummary
from coursecart.domain.model.dashboard import (
    EducatorDashboardSnapshot,
    EnrolledStudent,
    PublishedCourseBreakdown,
)
from coursecart.domain.model.purchase import (
    CheckoutSession,
    PendingPurchaseRecord,
    PurchaseStatus,
)
from coursecart.domain.model.user import UserProfile
from coursecart.domain.model.value_objects import Money, lenient_decimal

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


# --- Scalars ------------------------------------------------------------------


def reference_id(value: object) -> str | None:
    """Id of a reference that may be a bare id or a populated document."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        ref = value.get("_id") or value.get("id")
        return str(ref) if ref else None
    return None


def parse_datetime(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def lenient_int(value: object) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


# --- Courses ------------------------------------------------------------------


def course_from_json(raw: dict) -> CourseSummary:
    course_id = reference_id(raw)
    if course_id is None:
        raise ApiError("Course record without an id")

    enrolled = raw.get("enrolledStudents")
    enrollment_count = len(enrolled) if isinstance(enrolled, list) else lenient_int(enrolled)

    return CourseSummary(
        id=course_id,
        title=str(raw.get("courseTitle") or raw.get("title") or ""),
        price=Money.lenient(raw.get("coursePrice")),
        offer_price=Money.lenient(raw.get("courseOfferPrice")),
        discount=min(lenient_decimal(raw.get("discount")), _HUNDRED),
        enrollment_count=enrollment_count,
        is_published=bool(raw.get("isPublished", True)),
        created_at=parse_datetime(raw.get("createdAt")),
        rating_samples=_ratings(raw.get("courseRatings")),
        chapters=_chapters(raw.get("courseContent")),
        category=str(raw.get("courseCategory") or ""),
        educator_id=reference_id(raw.get("educator")),
        thumbnail=str(raw.get("courseThumbnail") or ""),
    )


def courses_from_json(records: object) -> list[CourseSummary]:
    courses: list[CourseSummary] = []
    for raw in records if isinstance(records, list) else []:
        if not isinstance(raw, dict):
            continue
        try:
            courses.append(course_from_json(raw))
        except ApiError as exc:
            logger.warning("Skipping malformed course record: %s", exc)
    return courses


def _ratings(samples: object) -> tuple[float, ...]:
    ratings: list[float] = []
    for sample in samples if isinstance(samples, list) else []:
        value = sample.get("rating") if isinstance(sample, dict) else sample
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            ratings.append(value)
    return tuple(ratings)


def _chapters(content: object) -> tuple[Chapter, ...]:
    chapters: list[Chapter] = []
    for raw in content if isinstance(content, list) else []:
        if not isinstance(raw, dict):
            continue
        lectures = raw.get("chapterContent")
        minutes = tuple(
            float(lenient_decimal(lecture.get("lectureDuration")))
            for lecture in (lectures if isinstance(lectures, list) else [])
            if isinstance(lecture, dict)
        )
        chapters.append(Chapter(title=str(raw.get("chapterTitle") or ""), lecture_minutes=minutes))
    return tuple(chapters)


def categories_from_json(records: object) -> list[Category]:
    categories: list[Category] = []
    for raw in records if isinstance(records, list) else []:
        if not isinstance(raw, dict) or reference_id(raw) is None:
            continue
        courses = courses_from_json(raw.get("courses"))
        categories.append(
            Category(
                id=reference_id(raw),
                name=str(raw.get("name") or ""),
                description=str(raw.get("description") or ""),
                course_count=lenient_int(raw.get("courseCount", len(courses))),
                courses=tuple(courses),
            )
        )
    return categories


# --- User & purchases ---------------------------------------------------------


def profile_from_json(raw: dict) -> UserProfile:
    user_id = reference_id(raw)
    if user_id is None:
        raise ApiError("Profile without a user id")
    enrolled = raw.get("enrolledCourses")
    return UserProfile(
        id=user_id,
        username=str(raw.get("username") or raw.get("name") or ""),
        is_educator=raw.get("isEducator") is True,
        enrolled_course_ids=tuple(
            ref
            for ref in (reference_id(e) for e in (enrolled if isinstance(enrolled, list) else []))
            if ref
        ),
    )


def purchase_from_json(raw: dict) -> PendingPurchaseRecord | None:
    purchase_id = reference_id(raw)
    status = str(raw.get("status") or "").lower()
    try:
        parsed_status = PurchaseStatus(status)
    except ValueError:
        logger.warning("Skipping purchase %s with unknown status %r", purchase_id, status)
        return None
    if purchase_id is None:
        return None
    return PendingPurchaseRecord(
        id=purchase_id,
        course_id=reference_id(raw.get("courseId")),
        amount=Money.lenient(raw.get("amount")),
        status=parsed_status,
        created_at=parse_datetime(raw.get("createdAt") or raw.get("purchaseDate")),
        last_updated=parse_datetime(raw.get("lastUpdated") or raw.get("updatedAt")),
    )


def purchases_from_json(records: object) -> list[PendingPurchaseRecord]:
    purchases = []
    for raw in records if isinstance(records, list) else []:
        if isinstance(raw, dict):
            purchase = purchase_from_json(raw)
            if purchase is not None:
                purchases.append(purchase)
    return purchases


def checkout_from_json(body: dict) -> CheckoutSession:
    session_url = body.get("sessionUrl")
    if not isinstance(session_url, str) or not session_url:
        raise ApiError(
            str(body.get("error") or "Failed to create payment session. Please try again.")
        )
    total = body.get("totalAmount")
    count = body.get("courseCount")
    return CheckoutSession(
        session_url=session_url,
        session_id=body.get("sessionId"),
        total_amount=Money.lenient(total) if total is not None else None,
        course_count=lenient_int(count) if count is not None else None,
    )


# --- Educator -----------------------------------------------------------------


def dashboard_from_json(data: dict) -> EducatorDashboardSnapshot:
    courses = data.get("publishedCourses")
    return EducatorDashboardSnapshot(
        total_earnings=Money.lenient(data.get("totalEarnings")),
        total_enrollments=lenient_int(data.get("totalEnrollments")),
        total_courses=lenient_int(data.get("totalCourses")),
        published_courses=tuple(
            _breakdown(raw) for raw in (courses if isinstance(courses, list) else [])
            if isinstance(raw, dict)
        ),
        updated_at=parse_datetime(data.get("updatedAt")),
    )


def _breakdown(raw: dict) -> PublishedCourseBreakdown:
    course_id = reference_id(raw.get("courseId")) or ""
    title = str(raw.get("title") or "")
    students = raw.get("enrolledStudents")
    return PublishedCourseBreakdown(
        course_id=course_id,
        title=title,
        price=Money.lenient(raw.get("price")),
        is_published=bool(raw.get("isPublished", True)),
        enrolled_students=tuple(
            EnrolledStudent(
                student_id=reference_id(s.get("studentId")) or "",
                course_id=course_id,
                course_title=title,
                enrolled_at=parse_datetime(s.get("enrolledAt")),
            )
            for s in (students if isinstance(students, list) else [])
            if isinstance(s, dict)
        ),
        total_enrollments=lenient_int(raw.get("totalEnrollments")),
        total_earnings=Money.lenient(raw.get("totalEarnings")),
    )
