"""
Request-scoped access to the objects built once at startup.

Catalogs, the advisory client and the services wrapping it live on
``app.state`` (see ``ramplo.main.lifespan``); tests replace them there or
through ``app.dependency_overrides``.
"""
from datetime import date

from fastapi import Request

from ramplo.ai.advisory import AdvisoryClient
from ramplo.services.catalog import RoadmapCatalog, TemplateCatalog
from ramplo.services.deal_coach import DealCoach
from ramplo.services.roadmap_selector import FallbackRoadmapSelector
from ramplo.services.template_customizer import TemplateCustomizer
from ramplo.services.template_selector import FallbackTemplateSelector


def get_roadmap_catalog(request: Request) -> RoadmapCatalog:
    return request.app.state.roadmap_catalog


def get_template_catalog(request: Request) -> TemplateCatalog:
    return request.app.state.template_catalog


def get_advisory(request: Request) -> AdvisoryClient:
    return request.app.state.advisory


def get_roadmap_selector(request: Request) -> FallbackRoadmapSelector:
    return request.app.state.roadmap_selector


def get_template_selector(request: Request) -> FallbackTemplateSelector:
    return request.app.state.template_selector


def get_template_customizer(request: Request) -> TemplateCustomizer:
    return request.app.state.template_customizer


def get_deal_coach(request: Request) -> DealCoach:
    return request.app.state.deal_coach


def get_today() -> date:
    return date.today()
