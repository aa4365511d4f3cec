"""
Mapping between calendar dates and a sprint's (week, day) grid.

A program runs on business days only: the start date is week 1 day 1,
the next weekday is day 2, and the sixth business day opens week 2.
Weekends never advance the cursor.
"""
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ramplo.db.crud.progress import get_user_progress, update_user_progress
from ramplo.schemas.roadmap import BUSINESS_DAYS_PER_WEEK, SprintTemplate


def is_business_day(d: date) -> bool:
    return d.weekday() < 5


def business_days_between(start: date, end: date) -> int:
    """Inclusive count of Mon-Fri dates in [start, end]; 0 when end < start."""
    if end < start:
        return 0
    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    for offset in range(remainder):
        if is_business_day(start + timedelta(days=full_weeks * 7 + offset)):
            count += 1
    return count


def week_and_day_for(elapsed: int, total_weeks: int) -> tuple[int, int]:
    """(week, day) for the ``elapsed``-th business day of the program."""
    if elapsed <= 0:
        return 1, 1
    week = (elapsed + BUSINESS_DAYS_PER_WEEK - 1) // BUSINESS_DAYS_PER_WEEK
    day = (elapsed - 1) % BUSINESS_DAYS_PER_WEEK + 1
    if week > total_weeks:
        return total_weeks, BUSINESS_DAYS_PER_WEEK
    return week, day


def position_on(start: date, on_date: date) -> Optional[tuple[int, int]]:
    """Unclamped (week, day) of a business date, or None outside the program."""
    if not is_business_day(on_date) or on_date < start:
        return None
    elapsed = business_days_between(start, on_date)
    if elapsed <= 0:
        return None
    return (elapsed - 1) // BUSINESS_DAYS_PER_WEEK + 1, (elapsed - 1) % BUSINESS_DAYS_PER_WEEK + 1


def sync_cursor(db: Session, user_id: int, sprint: SprintTemplate, today: date) -> tuple[int, int]:
    """Recomputes the user's current (week, day) from the start date and stores it."""
    progress = get_user_progress(db, user_id)
    if progress is None:
        return 1, 1

    elapsed = business_days_between(progress.start_date or today, today)
    week, day = week_and_day_for(elapsed, sprint.total_weeks)
    if (progress.current_week, progress.current_day) != (week, day):
        update_user_progress(db, user_id, current_week=week, current_day=day)
        db.commit()
        db.refresh(progress)
    return week, day
