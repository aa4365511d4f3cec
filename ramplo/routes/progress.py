from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ramplo.core.dependencies import get_roadmap_catalog, get_today
from ramplo.db.crud.progress import get_daily_connections, get_daily_loan_actions, get_user_progress
from ramplo.db.models.user import User
from ramplo.db.session import get_db
from ramplo.middleware.subscription import require_active_subscription
from ramplo.schemas.progress import (
    ConnectionCounts,
    DailyConnectionsResponse,
    DailyLoanActionsResponse,
    DashboardResponse,
    LoanActionCounts,
    ProgressResponse,
)
from ramplo.services.catalog import RoadmapCatalog
from ramplo.services.progress_tracker import (
    get_dashboard,
    record_daily_connections,
    record_loan_actions,
    refresh_ramp_run,
)

router = APIRouter()


@router.get("/api/progress", response_model=ProgressResponse)
def read_progress(
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    progress = get_user_progress(db, user.id)
    if progress is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No roadmap started yet")
    refresh_ramp_run(db, user.id, today)
    return progress


@router.get("/api/connections/today", response_model=DailyConnectionsResponse)
def read_connections_today(
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    row = get_daily_connections(db, user.id, today)
    if row is None:
        return DailyConnectionsResponse(date=today)
    return row


@router.post("/api/connections", response_model=DailyConnectionsResponse)
def log_connections(
    counts: ConnectionCounts,
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    return record_daily_connections(db, user.id, today, counts)


@router.get("/api/loan-actions/today", response_model=DailyLoanActionsResponse)
def read_loan_actions_today(
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    row = get_daily_loan_actions(db, user.id, today)
    if row is None:
        return DailyLoanActionsResponse(date=today)
    return row


@router.post("/api/loan-actions", response_model=DailyLoanActionsResponse)
def log_loan_actions(
    counts: LoanActionCounts,
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    return record_loan_actions(db, user.id, today, counts)


@router.get("/api/dashboard", response_model=DashboardResponse)
def read_dashboard(
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    catalog: RoadmapCatalog = Depends(get_roadmap_catalog),
    today: date = Depends(get_today),
):
    return get_dashboard(db, user.id, catalog, today)
