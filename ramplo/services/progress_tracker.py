"""
Task completion, daily activity logging and the metrics derived from them.

Counters on UserProgress are only changed through single-statement
``col = col + n`` updates. The ramp run (streak) is never incremented: it
is recomputed from task and connection rows and cached on the progress row.
"""
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ramplo.core.exceptions import AlreadyCompleted, TaskNotFound
from ramplo.db.crud.progress import (
    add_to_daily,
    get_connections_between,
    get_daily_connections,
    get_or_create_daily_connections,
    get_or_create_daily_loan_actions,
    get_user_progress,
    increment_user_progress,
    update_user_progress,
)
from ramplo.db.crud.tasks import get_task, get_tasks, mark_task_complete
from ramplo.db.models.progress import DailyConnections, DailyLoanActions
from ramplo.db.models.task import Task
from ramplo.schemas.progress import ConnectionCounts, DashboardResponse, LoanActionCounts
from ramplo.services import schedule
from ramplo.services.catalog import RoadmapCatalog

logger = logging.getLogger(__name__)


def complete_task(db: Session, user_id: int, task_id: int) -> Task:
    task = get_task(db, task_id)
    # Someone else's task is reported exactly like a missing one
    if task is None or task.user_id != user_id:
        raise TaskNotFound(task_id)
    if task.completed:
        raise AlreadyCompleted(task_id)

    if not mark_task_complete(db, user_id, task_id, datetime.utcnow()):
        # Lost the race to a concurrent completion
        db.rollback()
        raise AlreadyCompleted(task_id)
    increment_user_progress(db, user_id, tasks_completed=1)
    db.commit()

    db.refresh(task)
    logger.info(f"User {user_id} completed task {task_id} (week {task.week}, day {task.day})")
    return task


def record_daily_connections(db: Session, user_id: int, on_date: date, counts: ConnectionCounts) -> DailyConnections:
    """Adds the logged calls, texts and emails to the user's row for ``on_date``."""
    row = get_or_create_daily_connections(db, user_id, on_date)
    add_to_daily(
        db, DailyConnections, row.id,
        phone_calls=counts.phone_calls,
        text_messages=counts.text_messages,
        emails=counts.emails,
    )
    increment_user_progress(db, user_id)
    db.commit()
    db.refresh(row)
    return row


def record_loan_actions(db: Session, user_id: int, on_date: date, counts: LoanActionCounts) -> DailyLoanActions:
    row = get_or_create_daily_loan_actions(db, user_id, on_date)
    add_to_daily(
        db, DailyLoanActions, row.id,
        preapprovals=counts.preapprovals,
        applications=counts.applications,
        closings=counts.closings,
    )
    increment_user_progress(
        db, user_id,
        applications_submitted=counts.applications,
        loans_closed=counts.closings,
    )
    db.commit()
    db.refresh(row)
    return row


def is_ramp_run_day(tasks: Iterable[Task], connections: Optional[DailyConnections]) -> bool:
    """A day counts when it had tasks, all of them are done, and at least one client was contacted."""
    tasks = list(tasks)
    if not tasks or not all(t.completed for t in tasks):
        return False
    return connections is not None and connections.total > 0


def compute_ramp_run(db: Session, user_id: int, today: date) -> int:
    """Consecutive qualifying program days ending today (or yesterday, while today is still open)."""
    progress = get_user_progress(db, user_id)
    if progress is None or progress.start_date is None:
        return 0
    start = progress.start_date
    if today < start:
        return 0

    tasks_by_slot = defaultdict(list)
    for task in get_tasks(db, user_id):
        tasks_by_slot[(task.week, task.day)].append(task)
    connections_by_date = {c.date: c for c in get_connections_between(db, user_id, start, today)}

    streak = 0
    current = today
    while current >= start:
        if schedule.is_business_day(current):
            slot = schedule.position_on(start, current)
            qualifies = slot is not None and is_ramp_run_day(
                tasks_by_slot.get(slot, ()), connections_by_date.get(current)
            )
            if qualifies:
                streak += 1
            elif current != today:
                break
        current -= timedelta(days=1)
    return streak


def refresh_ramp_run(db: Session, user_id: int, today: date) -> int:
    ramp_run = compute_ramp_run(db, user_id, today)
    progress = get_user_progress(db, user_id)
    if progress is not None and progress.ramp_run_days != ramp_run:
        update_user_progress(db, user_id, ramp_run_days=ramp_run)
        db.commit()
        db.refresh(progress)
    return ramp_run


def get_dashboard(db: Session, user_id: int, catalog: RoadmapCatalog, today: date) -> DashboardResponse:
    progress = get_user_progress(db, user_id)
    sprint = catalog.get_sprint(progress.sprint_id) if progress and progress.sprint_id else None

    if sprint is not None:
        week, day = schedule.sync_cursor(db, user_id, sprint, today)
        current_week = sprint.get_week(week)
        theme = current_week.theme if current_week else None
    else:
        week, day, theme = 1, 1, None

    today_tasks = get_tasks(db, user_id, week=week, day=day)
    connections = get_daily_connections(db, user_id, today)
    ramp_run = refresh_ramp_run(db, user_id, today)

    return DashboardResponse(
        current_week=week,
        current_day=day,
        week_theme=theme,
        today_tasks_completed=sum(1 for t in today_tasks if t.completed),
        today_tasks_total=len(today_tasks),
        client_connects_today=connections.total if connections else 0,
        ramp_run_days=ramp_run,
        loans_closed=progress.loans_closed if progress else 0,
        applications_submitted=progress.applications_submitted if progress else 0,
        tasks_completed=progress.tasks_completed if progress else 0,
    )
