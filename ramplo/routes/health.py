from fastapi import APIRouter, Depends

from ramplo.core.config import settings
from ramplo.core.dependencies import get_advisory, get_roadmap_catalog, get_template_catalog
from ramplo.ai.advisory import AdvisoryClient
from ramplo.services.catalog import RoadmapCatalog, TemplateCatalog

router = APIRouter()


@router.get("/health")
def health(
    roadmaps: RoadmapCatalog = Depends(get_roadmap_catalog),
    templates: TemplateCatalog = Depends(get_template_catalog),
    advisory: AdvisoryClient = Depends(get_advisory),
):
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "roadmapCatalogVersion": roadmaps.version,
        "templateCatalogVersion": templates.version,
        "advisoryAvailable": advisory.available,
    }
