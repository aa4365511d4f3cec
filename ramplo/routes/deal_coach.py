from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ramplo.core.config import settings
from ramplo.core.dependencies import get_deal_coach
from ramplo.core.limiter import limiter
from ramplo.db.models.user import User
from ramplo.db.session import get_db
from ramplo.middleware.subscription import require_active_subscription
from ramplo.schemas.templates import DealCoachRequest, DealCoachSessionResponse
from ramplo.services.deal_coach import DealCoach, list_sessions
from ramplo.services.onboarding import load_profile

router = APIRouter()


@router.post("/api/deal-coach", response_model=DealCoachSessionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_ADVISORY)
async def ask_deal_coach(
    request: Request,
    body: DealCoachRequest,
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    coach: DealCoach = Depends(get_deal_coach),
):
    return await coach.coach(db, user.id, load_profile(db, user.id), body)


@router.get("/api/deal-coach/sessions", response_model=list[DealCoachSessionResponse])
def read_sessions(
    limit: int = Query(default=20, ge=1, le=100),
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    return list_sessions(db, user.id, limit=limit)
