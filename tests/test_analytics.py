"""
Tests for cross-habit analytics
"""
from datetime import date

from lifedash.services.habits import analytics
from lifedash.utils.timezone import FixedClock
from tests.conftest import completed, failed, make_habit


def sample_habits():
    return [
        make_habit(id="a", name="Read", history=[
            completed("2024-06-10"), completed("2024-06-11"), completed("2024-06-12"),
        ]),
        make_habit(id="b", name="Run", history=[
            completed("2024-06-10"), failed("2024-06-11"),
        ]),
    ]


class TestCompletion:
    """Tests for per-day completion counts."""

    def test_completion_for_date(self):
        stats = analytics.completion_for_date(sample_habits(), "2024-06-11")
        assert (stats.completed, stats.total, stats.rate) == (1, 2, 50)
        assert stats.date == date(2024, 6, 11)

    def test_no_habits(self):
        stats = analytics.completion_for_date([], "2024-06-11")
        assert (stats.completed, stats.total, stats.rate) == (0, 0, 0)

    def test_week_starts_on_monday(self):
        week = analytics.weekly_completion(sample_habits(), "2024-06-12")
        assert [d.date for d in week][0] == date(2024, 6, 10)
        assert week[-1].date == date(2024, 6, 16)
        assert [d.rate for d in week[:3]] == [100, 50, 50]
        assert [d.is_today for d in week] == [False, False, True, False, False, False, False]
        assert [d.is_future for d in week] == [False, False, False, True, True, True, True]

    def test_previous_week(self):
        week = analytics.weekly_completion(sample_habits(), "2024-06-12", week_offset=-1)
        assert week[0].date == date(2024, 6, 3)
        assert not any(d.is_future for d in week)
        assert all(d.completed == 0 for d in week)

    def test_week_from_clock(self):
        week = analytics.weekly_completion(sample_habits(), clock=FixedClock("2024-06-16"))
        assert week[0].date == date(2024, 6, 10)
        assert week[-1].is_today


class TestSummary:
    """Tests for the analytics summary."""

    def test_best_streak(self):
        assert analytics.best_streak(sample_habits(), "2024-06-12") == 3
        assert analytics.best_streak([], "2024-06-12") == 0

    def test_build_summary(self):
        summary = analytics.build_summary(sample_habits(), "2024-06-12")

        assert summary.today.completed == 1
        assert summary.today.is_today
        assert summary.yesterday.completed == 1
        assert summary.today_vs_yesterday == 0
        assert summary.week_average == 67
        assert summary.best_day.date == date(2024, 6, 10)
        assert summary.best_streak == 3
        assert len(summary.week) == 7

    def test_summary_without_completions(self):
        summary = analytics.build_summary([make_habit()], "2024-06-12")
        assert summary.best_day is None
        assert summary.week_average == 0
        assert summary.best_streak == 0
