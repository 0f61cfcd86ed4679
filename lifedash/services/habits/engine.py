"""
Habit Engine - Pure derivations over habit records

Per date, a habit is in one of three states which cycle in a fixed order:

    neutral -> completed -> failed -> neutral (entry deleted)

Neutral is never stored; it is the absence of a history entry. Nothing here
performs I/O: callers persist the returned values through the record store.
"""
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional
import logging

from lifedash.core.constants import DAY_NAMES, STREAK_LOOKBACK_DAYS
from lifedash.models.habit import (
    DayStatus,
    Habit,
    HabitStatus,
    HistoryEntry,
    SuccessRate,
    normalize_active_days,
)
from lifedash.utils.timezone import Clock, DateLike, previous_day, resolve_reference_date, to_date
from .history import sort_history

logger = logging.getLogger(__name__)

_TRANSITIONS = {
    None: HabitStatus.COMPLETED,
    HabitStatus.COMPLETED: HabitStatus.FAILED,
    HabitStatus.FAILED: None,
}


def weekday_index(day: DateLike) -> int:
    """Weekday of a calendar date, 0=Sunday..6=Saturday"""
    return (to_date(day).weekday() + 1) % 7


def round_percent(part: int, whole: int) -> int:
    """100 * part / whole rounded half up, in integer arithmetic"""
    return (200 * part + whole) // (2 * whole)


def _status_map(habit: Habit) -> Dict[date, HabitStatus]:
    return {entry.date: entry.status for entry in habit.history}


# ============================================================================
# STATUS
# ============================================================================

def get_status_for_date(habit: Habit, day: DateLike) -> Optional[HabitStatus]:
    """
    Look up the stored status of a habit on a date

    Args:
        habit: The habit
        day: Calendar date or 'YYYY-MM-DD'

    Returns:
        HabitStatus, or None when the day is neutral
    """
    target = to_date(day)
    for entry in habit.history:
        if entry.date == target:
            return entry.status
    return None


def get_today_status(habit: Habit, clock: Optional[Clock] = None) -> Optional[HabitStatus]:
    """Status of the habit on the clock's today"""
    return get_status_for_date(habit, resolve_reference_date(None, clock))


def next_status(current: Optional[HabitStatus]) -> Optional[HabitStatus]:
    """Next state in the neutral -> completed -> failed -> neutral cycle"""
    return _TRANSITIONS[current]


def cycle_status(habit: Habit, day: Optional[DateLike] = None,
                 clock: Optional[Clock] = None) -> List[HistoryEntry]:
    """
    Advance a day's status one step through the cycle

    Future dates are not rejected here; callers that face the user are
    expected to refuse them.

    Args:
        habit: The habit
        day: Date to cycle, defaults to today
        clock: Clock used when day is omitted

    Returns:
        The full replacement history, sorted by date descending
    """
    target = resolve_reference_date(day, clock)
    status = next_status(get_status_for_date(habit, target))

    history = [entry for entry in habit.history if entry.date != target]
    if status is not None:
        history.append(HistoryEntry(date=target, status=status))

    logger.debug(f"Habit {habit.id} on {target}: -> {status.value if status else 'neutral'}")
    return sort_history(history)


# ============================================================================
# SCHEDULE
# ============================================================================

def is_active_day(habit: Habit, day: DateLike) -> bool:
    """True when the weekday of day is in the habit's schedule"""
    return weekday_index(day) in habit.active_days


def is_today_active(habit: Habit, clock: Optional[Clock] = None) -> bool:
    """True when the habit is scheduled for the clock's today"""
    return is_active_day(habit, resolve_reference_date(None, clock))


def update_active_days(habit: Habit, days: Iterable[int]) -> Habit:
    """
    Replace a habit's weekly schedule

    An empty schedule is allowed and leaves the habit inactive on every
    day: no streak, no backfill, no success-rate denominator.

    Raises:
        ValueError: If a weekday index falls outside 0..6
    """
    return habit.model_copy(update={"active_days": normalize_active_days(list(days))})


def get_weekly_status(habit: Habit, reference: Optional[DateLike] = None,
                      clock: Optional[Clock] = None) -> List[DayStatus]:
    """
    Build the Sunday-to-Saturday week containing the reference date

    Inactive and future days always report no status, even when a stray
    entry exists for them (for example after a schedule change).

    Args:
        habit: The habit
        reference: Date whose week is shown, defaults to today
        clock: Clock used when reference is omitted

    Returns:
        Seven DayStatus items, index 0 is Sunday
    """
    ref = resolve_reference_date(reference, clock)
    week_start = ref - timedelta(days=weekday_index(ref))
    statuses = _status_map(habit)

    week = []
    for i in range(7):
        day = week_start + timedelta(days=i)
        is_active = i in habit.active_days
        is_future = day > ref
        week.append(DayStatus(
            day_index=i,
            day_name=DAY_NAMES[i],
            date=day,
            is_active=is_active,
            is_future=is_future,
            is_today=day == ref,
            status=statuses.get(day) if is_active and not is_future else None,
        ))
    return week


# ============================================================================
# STATISTICS
# ============================================================================

def calculate_streak(habit: Habit, reference: Optional[DateLike] = None,
                     clock: Optional[Clock] = None) -> int:
    """
    Count consecutive completed active days, walking back from the reference

    Inactive days are skipped. A failed day ends the walk. A neutral day ends
    the walk too, except on the reference day itself, which is still
    undecided and is passed over without counting.

    Returns:
        Streak length, 0 or more
    """
    ref = resolve_reference_date(reference, clock)
    statuses = _status_map(habit)

    streak = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        day = ref - timedelta(days=offset)
        if not is_active_day(habit, day):
            continue

        status = statuses.get(day)
        if status is HabitStatus.COMPLETED:
            streak += 1
        elif status is HabitStatus.FAILED:
            break
        elif day != ref:
            break

    return streak


def count_active_days(habit: Habit, start: date, end: date) -> int:
    """Number of scheduled days in [start, end] inclusive"""
    span = (end - start).days + 1
    if span <= 0:
        return 0

    full_weeks, remainder = divmod(span, 7)
    total = full_weeks * len(habit.active_days)
    first = weekday_index(start)
    total += sum(1 for i in range(remainder) if (first + i) % 7 in habit.active_days)
    return total


def calculate_success_rate(habit: Habit, reference: Optional[DateLike] = None,
                           clock: Optional[Clock] = None) -> SuccessRate:
    """
    Percentage of scheduled days completed since tracking started

    Tracking starts at tracking_start_date, or at the oldest history entry
    when that is unset. The current schedule is applied to the whole
    window, so completions logged on days that are no longer active do not
    count.

    Returns:
        SuccessRate with rate None when there is nothing to measure
    """
    start = habit.tracking_start_date
    if start is None and habit.history:
        start = min(entry.date for entry in habit.history)
    if start is None:
        return SuccessRate()

    ref = resolve_reference_date(reference, clock)
    total_days = count_active_days(habit, start, ref)
    if total_days <= 0:
        return SuccessRate(start_date=start)

    completed_days = sum(
        1 for entry in habit.history
        if entry.status is HabitStatus.COMPLETED
        and start <= entry.date <= ref
        and is_active_day(habit, entry.date)
    )

    return SuccessRate(
        rate=round_percent(completed_days, total_days),
        completed_days=completed_days,
        total_days=total_days,
        start_date=start,
    )


# ============================================================================
# BACKFILL & RESET
# ============================================================================

def mark_missed(habits: Iterable[Habit], reference: Optional[DateLike] = None,
                clock: Optional[Clock] = None) -> List[Habit]:
    """
    Record an explicit failure for yesterday where nothing was recorded

    Only the single day before the reference date is considered, and only
    for habits scheduled on that weekday. Running it again is a no-op.

    Returns:
        Copies of the habits whose history changed
    """
    yesterday = previous_day(resolve_reference_date(reference, clock))

    updated = []
    for habit in habits:
        if not is_active_day(habit, yesterday):
            continue
        if get_status_for_date(habit, yesterday) is not None:
            continue

        history = sort_history(habit.history + [HistoryEntry(date=yesterday, status=HabitStatus.FAILED)])
        updated.append(habit.model_copy(update={"history": history}))

    return updated


def reset_stats(habit: Habit, reference: Optional[DateLike] = None,
                clock: Optional[Clock] = None) -> dict:
    """
    Clear a habit's history and restart tracking on the reference date

    Returns:
        Field patch {"history": [], "tracking_start_date": date}
    """
    return {
        "history": [],
        "tracking_start_date": resolve_reference_date(reference, clock),
    }
