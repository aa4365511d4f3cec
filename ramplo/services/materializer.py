import logging
from datetime import date

from sqlalchemy.orm import Session

from ramplo.db.crud.tasks import add_tasks
from ramplo.db.models.progress import UserProgress
from ramplo.db.models.task import Task
from ramplo.schemas.roadmap import SprintTemplate

logger = logging.getLogger(__name__)


def task_rows(user_id: int, sprint: SprintTemplate) -> list[dict]:
    """One row per DayTaskTemplate, content copied verbatim."""
    return [
        {
            "user_id": user_id,
            "title": t.title,
            "description": t.description,
            "category": t.category,
            "estimated_minutes": t.estimated_minutes,
            "week": t.week,
            "day": t.day,
            "completed": False,
        }
        for t in sprint.iter_tasks()
    ]


def materialize(db: Session, user_id: int, sprint: SprintTemplate, commit: bool = True) -> list[Task]:
    """
    Copies every task of ``sprint`` into the user's task list.

    Not idempotent: calling it twice duplicates the rows. Onboarding is the
    only caller and it runs once per user.
    """
    tasks = add_tasks(db, task_rows(user_id, sprint))
    if commit:
        db.commit()
        for task in tasks:
            db.refresh(task)
    logger.info(f"Materialized {len(tasks)} tasks from roadmap {sprint.id} for user {user_id}")
    return tasks


def start_program(db: Session, user_id: int, sprint: SprintTemplate, start_date: date, commit: bool = True) -> UserProgress:
    progress = UserProgress(
        user_id=user_id,
        sprint_id=sprint.id,
        start_date=start_date,
        current_week=1,
        current_day=1,
        tasks_completed=0,
        applications_submitted=0,
        loans_closed=0,
        ramp_run_days=0,
    )
    db.add(progress)
    if commit:
        db.commit()
        db.refresh(progress)
    return progress
