"""
Roadmap and outreach-template catalogs.

Both are versioned JSON documents loaded and validated once at startup,
then handed to the services that need them. A catalog that fails
validation (gaps in week numbering, days outside Mon-Fri, duplicate ids)
stops the app from starting.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from ramplo.core.exceptions import SprintNotFound, TemplateNotFound
from ramplo.schemas.roadmap import RoadmapCatalogData, SprintTemplate
from ramplo.schemas.templates import OutreachTemplate, TemplateCatalogData

logger = logging.getLogger(__name__)


class RoadmapCatalog:
    def __init__(self, sprints: list[SprintTemplate], version: str = "dev"):
        if not sprints:
            raise ValueError("roadmap catalog must contain at least one sprint")
        self.version = version
        self._sprints = list(sprints)
        self._by_id = {s.id: s for s in self._sprints}

    @classmethod
    def from_data(cls, data: dict) -> "RoadmapCatalog":
        parsed = RoadmapCatalogData.model_validate(data)
        return cls(parsed.sprints, version=parsed.version)

    def list_sprints(self) -> list[SprintTemplate]:
        return list(self._sprints)

    def get_sprint(self, sprint_id: str) -> Optional[SprintTemplate]:
        return self._by_id.get(sprint_id)

    def require_sprint(self, sprint_id: str) -> SprintTemplate:
        sprint = self.get_sprint(sprint_id)
        if sprint is None:
            raise SprintNotFound(sprint_id)
        return sprint

    def default_sprint(self) -> SprintTemplate:
        return self._sprints[0]

    def __len__(self) -> int:
        return len(self._sprints)


class TemplateCatalog:
    def __init__(self, templates: list[OutreachTemplate], version: str = "dev"):
        if not templates:
            raise ValueError("template catalog must contain at least one template")
        self.version = version
        self._templates = list(templates)
        self._by_id = {t.id: t for t in self._templates}

    @classmethod
    def from_data(cls, data: dict) -> "TemplateCatalog":
        parsed = TemplateCatalogData.model_validate(data)
        return cls(parsed.templates, version=parsed.version)

    def list_templates(self) -> list[OutreachTemplate]:
        return list(self._templates)

    def get_template(self, template_id: str) -> Optional[OutreachTemplate]:
        return self._by_id.get(template_id)

    def require_template(self, template_id: str) -> OutreachTemplate:
        template = self.get_template(template_id)
        if template is None:
            raise TemplateNotFound(template_id)
        return template

    def __len__(self) -> int:
        return len(self._templates)


def _read_json(path: str) -> dict:
    with Path(path).open(encoding="utf-8") as fh:
        return json.load(fh)


def load_roadmap_catalog(path: str) -> RoadmapCatalog:
    catalog = RoadmapCatalog.from_data(_read_json(path))
    logger.info(f"Loaded roadmap catalog v{catalog.version} ({len(catalog)} sprints) from {path}")
    return catalog


def load_template_catalog(path: str) -> TemplateCatalog:
    catalog = TemplateCatalog.from_data(_read_json(path))
    logger.info(f"Loaded outreach template catalog v{catalog.version} ({len(catalog)} templates) from {path}")
    return catalog
