import json
import logging

from ramplo.ai.advisory import AdvisoryClient
from ramplo.ai.prompts import TEMPLATE_SELECTION_PROMPT, build_profile_context
from ramplo.core.exceptions import AdvisoryUnavailable
from ramplo.schemas.profile import OnboardingProfile
from ramplo.schemas.templates import TemplateSelectionResponse
from ramplo.services.catalog import TemplateCatalog
from ramplo.services.selection import FallbackSelector, SOURCE_ADVISORY, SOURCE_FALLBACK

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
DEFAULT_FOCUS = "purchase"
DEFAULT_TONE = "professional"

TEMPLATE_RESPONSE_KEYS = ("selectedTemplateIds",)


class AdvisoryTemplateSelector:
    def __init__(self, advisory: AdvisoryClient, catalog: TemplateCatalog):
        self.advisory = advisory
        self.catalog = catalog

    async def select(self, profile: OnboardingProfile, limit: int = DEFAULT_LIMIT) -> TemplateSelectionResponse:
        options = [t.summary() for t in self.catalog.list_templates()]
        prompt = TEMPLATE_SELECTION_PROMPT.format(
            profile_context=build_profile_context(profile),
            options=json.dumps(options, indent=2),
            limit=limit,
        )
        analysis = await self.advisory.advise(prompt, TEMPLATE_RESPONSE_KEYS)

        ids = analysis["selectedTemplateIds"]
        if not isinstance(ids, list):
            raise AdvisoryUnavailable("selectedTemplateIds is not a list")

        # Catalog order, unknown ids dropped
        wanted = {str(i) for i in ids}
        templates = [t for t in self.catalog.list_templates() if t.id in wanted][:limit]
        if not templates:
            raise AdvisoryUnavailable("no selected template id matches the catalog")

        return TemplateSelectionResponse(
            selected_templates=templates,
            reasoning=str(analysis.get("reasoning") or ""),
            source=SOURCE_ADVISORY,
        )


class RuleBasedTemplateSelector:
    def __init__(self, catalog: TemplateCatalog):
        self.catalog = catalog

    def choose(self, profile: OnboardingProfile, limit: int = DEFAULT_LIMIT) -> TemplateSelectionResponse:
        focus = profile.primary_focus or DEFAULT_FOCUS
        borrower_types = set(profile.borrower_types)
        tone = profile.tone_preference or DEFAULT_TONE

        matched = [
            t for t in self.catalog.list_templates()
            if focus in t.focus
            or borrower_types.intersection(t.borrower_types)
            or t.tone == tone
        ]
        return TemplateSelectionResponse(
            selected_templates=matched[:limit],
            reasoning=f"Selected templates matching focus area ({focus}), tone ({tone}), and target borrower types",
            source=SOURCE_FALLBACK,
        )

    async def select(self, profile: OnboardingProfile, limit: int = DEFAULT_LIMIT) -> TemplateSelectionResponse:
        return self.choose(profile, limit=limit)


class FallbackTemplateSelector(FallbackSelector):
    name = "template selection"


def build_template_selector(advisory: AdvisoryClient, catalog: TemplateCatalog) -> FallbackTemplateSelector:
    return FallbackTemplateSelector(
        AdvisoryTemplateSelector(advisory, catalog),
        RuleBasedTemplateSelector(catalog),
    )
