from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ramplo.core.config import settings
from ramplo.core.dependencies import get_roadmap_catalog, get_roadmap_selector
from ramplo.core.limiter import limiter
from ramplo.db.models.user import User
from ramplo.db.session import get_db
from ramplo.middleware.subscription import require_active_subscription
from ramplo.schemas.roadmap import RoadmapSelectionResponse, SprintSummary
from ramplo.services.catalog import RoadmapCatalog
from ramplo.services.onboarding import load_profile
from ramplo.services.roadmap_selector import FallbackRoadmapSelector

router = APIRouter()


@router.get("/api/roadmap/sprints", response_model=list[SprintSummary])
def list_sprints(
    user: User = Depends(require_active_subscription),
    catalog: RoadmapCatalog = Depends(get_roadmap_catalog),
):
    return [
        SprintSummary(
            id=s.id,
            name=s.name,
            focus=s.focus,
            experience_level=s.experience_level,
            time_commitment=s.time_commitment,
            description=s.description,
            total_weeks=s.total_weeks,
            total_tasks=sum(len(w.tasks) for w in s.weeks),
        )
        for s in catalog.list_sprints()
    ]


# Preview only: tasks already materialized for the user are left untouched
@router.post("/api/roadmap/select", response_model=RoadmapSelectionResponse)
@limiter.limit(settings.RATE_LIMIT_ADVISORY)
async def preview_selection(
    request: Request,
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    selector: FallbackRoadmapSelector = Depends(get_roadmap_selector),
):
    profile = load_profile(db, user.id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Complete onboarding first")
    return await selector.select(profile)
