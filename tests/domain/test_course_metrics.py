"""Unit tests for derived course metrics."""

import pytest

from coursecart.domain.model.course import Chapter
from coursecart.domain.service import course_metrics
from tests.fakes import make_course


class TestRating:

    def test_no_samples_is_zero(self):
        assert course_metrics.rating(make_course()) == 0.0

    @pytest.mark.parametrize(
        "samples, expected",
        [
            ((5, 4), 4.5),
            ((5, 4, 4), 4.5),  # 4.33 -> 4.5
            ((4, 4, 3), 3.5),  # 3.67 -> 3.5
            ((5, 5, 4, 4, 4), 4.5),  # 4.4 -> 4.5
            ((4, 4, 4, 4, 5), 4.0),  # 4.2 -> 4.0
            ((3, 4), 3.5),
        ],
    )
    def test_mean_rounded_to_half(self, samples, expected):
        course = make_course(rating_samples=samples)
        assert course_metrics.rating(course) == expected


class TestDurations:

    def _course(self, *chapters):
        return make_course(chapters=tuple(Chapter("ch", lecture_minutes=m) for m in chapters))

    def test_lecture_count_and_minutes(self):
        course = self._course((10, 20), (30,))
        assert course_metrics.lecture_count(course) == 3
        assert course_metrics.total_minutes(course) == 60

    def test_humanized_course_duration(self):
        assert course_metrics.course_duration(self._course((60, 65))) == "2 hours, 5 minutes"
        assert course_metrics.course_duration(self._course((1,))) == "1 minute"
        assert course_metrics.course_duration(self._course()) == "0 minutes"

    def test_chapter_duration(self):
        assert course_metrics.chapter_duration(Chapter("ch", (30, 30))) == "1 hour"

    @pytest.mark.parametrize(
        "minutes, expected",
        [(75.5, "1h 15m 30s"), (2.5, "2m 30s"), (0.25, "15s")],
    )
    def test_lecture_duration_format(self, minutes, expected):
        assert course_metrics.format_lecture_duration(minutes) == expected


class TestDurationWeeks:

    def test_no_lectures_counts_as_one_week(self):
        assert course_metrics.duration_weeks(make_course()) == 1

    def test_short_course_is_at_least_one_week(self):
        course = make_course(chapters=(Chapter("ch", (5,)),))
        assert course_metrics.duration_weeks(course) == 1

    def test_rounds_up_to_whole_weeks(self):
        course = make_course(chapters=(Chapter("ch", (300, 1)),))
        assert course_metrics.duration_weeks(course) == 2

    def test_capped(self):
        course = make_course(chapters=(Chapter("ch", (300 * 500,)),))
        assert course_metrics.duration_weeks(course) == course_metrics.DEFAULT_MAX_WEEKS
        assert course_metrics.duration_weeks(course, max_weeks=12) == 12
