import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ramplo.core.dependencies import get_roadmap_catalog, get_today
from ramplo.core.exceptions import AlreadyCompleted, TaskNotFound
from ramplo.db.crud.progress import get_user_progress
from ramplo.db.crud.tasks import get_tasks
from ramplo.db.models.user import User
from ramplo.db.session import get_db
from ramplo.middleware.subscription import require_active_subscription
from ramplo.schemas.progress import TaskResponse
from ramplo.services import schedule
from ramplo.services.catalog import RoadmapCatalog
from ramplo.services.progress_tracker import complete_task

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/tasks", response_model=list[TaskResponse])
def list_tasks(
    week: Optional[int] = Query(default=None, ge=1),
    day: Optional[int] = Query(default=None, ge=1, le=5),
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    catalog: RoadmapCatalog = Depends(get_roadmap_catalog),
    today: date = Depends(get_today),
):
    """Tasks for one (week, day); either value defaults to the user's current position."""
    if week is None or day is None:
        progress = get_user_progress(db, user.id)
        sprint = catalog.get_sprint(progress.sprint_id) if progress and progress.sprint_id else None
        if sprint is not None:
            current_week, current_day = schedule.sync_cursor(db, user.id, sprint, today)
        else:
            current_week, current_day = 1, 1
        week = current_week if week is None else week
        day = current_day if day is None else day

    return get_tasks(db, user.id, week=week, day=day)


@router.patch("/api/tasks/{task_id}/complete", response_model=TaskResponse)
def complete(
    task_id: int,
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    try:
        return complete_task(db, user.id, task_id)
    except TaskNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AlreadyCompleted as e:
        logger.info(f"Duplicate completion of task {task_id} by user {user.id}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
