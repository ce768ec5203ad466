"""Educator dashboard aggregate.

Totals are computed by the server only; the client never recomputes
earnings or enrollment counts from the per-course breakdown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from coursecart.domain.model.value_objects import Money

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class EnrolledStudent:
    student_id: str
    course_id: str
    course_title: str
    enrolled_at: datetime | None = None


@dataclass(frozen=True)
class PublishedCourseBreakdown:
    course_id: str
    title: str
    price: Money
    is_published: bool
    enrolled_students: tuple[EnrolledStudent, ...] = ()
    total_enrollments: int = 0
    total_earnings: Money = field(default_factory=Money.zero)


@dataclass(frozen=True)
class EducatorDashboardSnapshot:
    total_earnings: Money
    total_enrollments: int
    total_courses: int
    published_courses: tuple[PublishedCourseBreakdown, ...] = ()
    updated_at: datetime | None = None

    @property
    def has_courses(self) -> bool:
        return len(self.published_courses) > 0

    @staticmethod
    def empty() -> EducatorDashboardSnapshot:
        """A new educator with nothing published yet."""
        return EducatorDashboardSnapshot(
            total_earnings=Money.zero(), total_enrollments=0, total_courses=0
        )


def flatten_roster(
    courses: tuple[PublishedCourseBreakdown, ...],
) -> list[EnrolledStudent]:
    """Every enrolled student across all courses, newest enrollment first.

    Entries without an enrollment timestamp sort last.
    """
    roster = [student for course in courses for student in course.enrolled_students]
    roster.sort(key=_enrollment_key, reverse=True)
    return roster


def _enrollment_key(student: EnrolledStudent) -> datetime:
    if student.enrolled_at is None:
        return _EPOCH
    if student.enrolled_at.tzinfo is None:
        return student.enrolled_at.replace(tzinfo=timezone.utc)
    return student.enrolled_at
