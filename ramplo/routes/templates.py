from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ramplo.core.config import settings
from ramplo.core.dependencies import get_template_catalog, get_template_customizer, get_template_selector
from ramplo.core.exceptions import TemplateNotFound
from ramplo.core.limiter import limiter
from ramplo.db.models.user import User
from ramplo.db.session import get_db
from ramplo.middleware.subscription import require_active_subscription
from ramplo.schemas.templates import (
    CustomizationRequest,
    CustomizedTemplateResponse,
    OutreachTemplate,
    TemplateSelectRequest,
    TemplateSelectionResponse,
)
from ramplo.services.catalog import TemplateCatalog
from ramplo.services.onboarding import load_profile
from ramplo.services.template_customizer import TemplateCustomizer
from ramplo.services.template_selector import FallbackTemplateSelector

router = APIRouter()


@router.get("/api/templates", response_model=list[OutreachTemplate])
def list_templates(
    user: User = Depends(require_active_subscription),
    catalog: TemplateCatalog = Depends(get_template_catalog),
):
    return catalog.list_templates()


@router.post("/api/templates/select", response_model=TemplateSelectionResponse)
@limiter.limit(settings.RATE_LIMIT_ADVISORY)
async def select_templates(
    request: Request,
    body: TemplateSelectRequest,
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    selector: FallbackTemplateSelector = Depends(get_template_selector),
):
    profile = load_profile(db, user.id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Complete onboarding first")
    return await selector.select(profile, limit=body.limit)


@router.post("/api/templates/{template_id}/customize", response_model=CustomizedTemplateResponse)
@limiter.limit(settings.RATE_LIMIT_ADVISORY)
async def customize_template(
    request: Request,
    template_id: str,
    body: CustomizationRequest,
    user: User = Depends(require_active_subscription),
    db: Session = Depends(get_db),
    catalog: TemplateCatalog = Depends(get_template_catalog),
    customizer: TemplateCustomizer = Depends(get_template_customizer),
):
    try:
        template = catalog.require_template(template_id)
    except TemplateNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return await customizer.customize(template, user, load_profile(db, user.id), body)
