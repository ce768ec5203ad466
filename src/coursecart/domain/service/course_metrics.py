"""Domain service: derived course metrics.

Pure functions over CourseSummary snapshots, used by the catalog cache and
by anything that displays a course.
"""

from __future__ import annotations

import math

from coursecart.domain.model.course import Chapter, CourseSummary

# Study time assumed per week when estimating a course length in weeks.
STUDY_MINUTES_PER_WEEK = 5 * 60
DEFAULT_MAX_WEEKS = 52


def rating(course: CourseSummary) -> float:
    """Mean of the rating samples rounded to the nearest 0.5 (0 if none)."""
    if not course.rating_samples:
        return 0.0
    mean = sum(course.rating_samples) / len(course.rating_samples)
    return math.floor(mean * 2 + 0.5) / 2


def lecture_count(course: CourseSummary) -> int:
    return sum(len(chapter.lecture_minutes) for chapter in course.chapters)


def total_minutes(course: CourseSummary) -> float:
    return sum(chapter.total_minutes for chapter in course.chapters)


def humanize_minutes(minutes: float) -> str:
    """Format a duration as hours and minutes, e.g. ``"2 hours, 5 minutes"``."""
    whole = int(round(minutes))
    hours, mins = divmod(whole, 60)
    parts = []
    if hours:
        parts.append(f"{hours} hour" + ("" if hours == 1 else "s"))
    if mins or not hours:
        parts.append(f"{mins} minute" + ("" if mins == 1 else "s"))
    return ", ".join(parts)


def course_duration(course: CourseSummary) -> str:
    return humanize_minutes(total_minutes(course))


def chapter_duration(chapter: Chapter) -> str:
    return humanize_minutes(chapter.total_minutes)


def format_lecture_duration(minutes: float) -> str:
    """Format a single lecture length as ``"1h 2m 30s"``, ``"2m 30s"`` or ``"30s"``."""
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    secs = int(round((minutes % 1) * 60)) % 60
    if hours > 0:
        return f"{hours}h {mins}m {secs}s"
    if mins > 0:
        return f"{mins}m {secs}s"
    return f"{secs}s"


def duration_weeks(course: CourseSummary, max_weeks: int = DEFAULT_MAX_WEEKS) -> int:
    """Estimated length in weeks, at least 1 and at most ``max_weeks``.

    Courses without any lecture duration count as one week.
    """
    minutes = total_minutes(course)
    if minutes <= 0:
        return 1
    weeks = math.ceil(minutes / STUDY_MINUTES_PER_WEEK)
    return max(1, min(weeks, max_weeks))
