"""
Habit analytics - completion numbers across all of a user's habits
"""
from datetime import timedelta
from typing import List, Optional, Sequence

from lifedash.models.analytics import AnalyticsSummary, DailyCompletion
from lifedash.models.habit import Habit, HabitStatus
from lifedash.utils.timezone import Clock, DateLike, previous_day, resolve_reference_date, to_date
from .engine import calculate_streak, get_status_for_date, round_percent


def completion_for_date(habits: Sequence[Habit], day: DateLike) -> DailyCompletion:
    """
    Count the habits completed on a day

    Args:
        habits: All habits of a user
        day: Calendar date or 'YYYY-MM-DD'

    Returns:
        DailyCompletion with rate 0 when there are no habits
    """
    target = to_date(day)
    total = len(habits)
    completed = sum(1 for h in habits if get_status_for_date(h, target) is HabitStatus.COMPLETED)
    return DailyCompletion(
        date=target,
        completed=completed,
        total=total,
        rate=round_percent(completed, total) if total > 0 else 0,
    )


def weekly_completion(habits: Sequence[Habit], reference: Optional[DateLike] = None,
                      week_offset: int = 0, clock: Optional[Clock] = None) -> List[DailyCompletion]:
    """
    Daily completion for a Monday-to-Sunday week

    Args:
        habits: All habits of a user
        reference: Today, defaults to the clock's today
        week_offset: Whole weeks to shift from the reference week (-1 is last week)
        clock: Clock used when reference is omitted

    Returns:
        Seven DailyCompletion items starting on Monday
    """
    today = resolve_reference_date(reference, clock)
    target = today + timedelta(weeks=week_offset)
    week_start = target - timedelta(days=target.weekday())

    week = []
    for i in range(7):
        day = week_start + timedelta(days=i)
        stats = completion_for_date(habits, day)
        week.append(stats.model_copy(update={"is_future": day > today, "is_today": day == today}))
    return week


def best_streak(habits: Sequence[Habit], reference: Optional[DateLike] = None,
                clock: Optional[Clock] = None) -> int:
    """Longest current streak among the habits"""
    ref = resolve_reference_date(reference, clock)
    return max((calculate_streak(h, ref) for h in habits), default=0)


def build_summary(habits: Sequence[Habit], reference: Optional[DateLike] = None,
                  week_offset: int = 0, clock: Optional[Clock] = None) -> AnalyticsSummary:
    """Assemble today/yesterday comparison, the week's rows and best values"""
    today = resolve_reference_date(reference, clock)
    today_stats = completion_for_date(habits, today).model_copy(update={"is_today": True})
    yesterday_stats = completion_for_date(habits, previous_day(today))

    week = weekly_completion(habits, today, week_offset)
    past_days = [d for d in week if not d.is_future]
    week_average = round_percent(sum(d.rate for d in past_days), 100 * len(past_days)) if past_days else 0

    best_day = None
    for day in past_days:
        if day.rate > (best_day.rate if best_day else 0):
            best_day = day

    return AnalyticsSummary(
        today=today_stats,
        yesterday=yesterday_stats,
        today_vs_yesterday=today_stats.completed - yesterday_stats.completed,
        week=week,
        week_average=week_average,
        best_day=best_day,
        best_streak=best_streak(habits, today),
    )
