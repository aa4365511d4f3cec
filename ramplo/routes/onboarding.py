from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ramplo.core.config import settings
from ramplo.core.dependencies import get_roadmap_selector, get_today
from ramplo.core.exceptions import AlreadyOnboarded
from ramplo.core.limiter import limiter
from ramplo.db.models.user import User
from ramplo.db.session import get_db
from ramplo.middleware.subscription import require_active_subscription
from ramplo.schemas.profile import OnboardingProfile
from ramplo.schemas.roadmap import RoadmapSelectionResponse
from ramplo.services.onboarding import complete_onboarding
from ramplo.services.roadmap_selector import FallbackRoadmapSelector

router = APIRouter()


@router.post("/api/onboarding", response_model=RoadmapSelectionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_ADVISORY)
async def submit_onboarding(
    request: Request,
    profile_in: OnboardingProfile,
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    selector: FallbackRoadmapSelector = Depends(get_roadmap_selector),
    today: date = Depends(get_today),
):
    try:
        return await complete_onboarding(db, user, profile_in, selector, today)
    except AlreadyOnboarded as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
