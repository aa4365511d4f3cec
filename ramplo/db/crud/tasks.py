from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from ramplo.db.models.task import Task

def get_tasks(db: Session, user_id: int, week: Optional[int] = None, day: Optional[int] = None) -> list[Task]:
    query = db.query(Task).filter(Task.user_id == user_id)
    if week is not None:
        query = query.filter(Task.week == week)
    if day is not None:
        query = query.filter(Task.day == day)
    return query.order_by(Task.week, Task.day, Task.id).all()

def get_task(db: Session, task_id: int) -> Task | None:
    return db.query(Task).filter(Task.id == task_id).first()

def add_tasks(db: Session, rows: Iterable[dict]) -> list[Task]:
    """Stages task rows in the session; the caller owns the commit."""
    tasks = [Task(**row) for row in rows]
    db.add_all(tasks)
    return tasks

def mark_task_complete(db: Session, user_id: int, task_id: int, completed_at: datetime) -> bool:
    """
    Conditionally flips an open task owned by ``user_id`` to completed.
    Returns False when no row matched (missing, foreign or already done),
    so two racing completions cannot both succeed. Does not commit.
    """
    result = db.execute(
        update(Task)
        .where(Task.id == task_id, Task.user_id == user_id, Task.completed.is_(False))
        .values(completed=True, completed_at=completed_at)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
