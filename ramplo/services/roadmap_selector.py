import json
import logging

from ramplo.ai.advisory import AdvisoryClient
from ramplo.ai.prompts import ROADMAP_SELECTION_PROMPT, build_profile_context
from ramplo.core.exceptions import AdvisoryUnavailable
from ramplo.schemas.profile import OnboardingProfile
from ramplo.schemas.roadmap import RoadmapSelectionResponse
from ramplo.services.catalog import RoadmapCatalog
from ramplo.services.selection import FallbackSelector, SOURCE_ADVISORY, SOURCE_FALLBACK

logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 2

DEFAULT_FOCUS = "purchase"
DEFAULT_EXPERIENCE = "new"
DEFAULT_TIME = "30"

ROADMAP_RESPONSE_KEYS = ("selectedRoadmapId",)


class AdvisoryRoadmapSelector:
    def __init__(self, advisory: AdvisoryClient, catalog: RoadmapCatalog):
        self.advisory = advisory
        self.catalog = catalog

    def build_prompt(self, profile: OnboardingProfile) -> str:
        options = [s.summary() for s in self.catalog.list_sprints()]
        return ROADMAP_SELECTION_PROMPT.format(
            profile_context=build_profile_context(profile),
            options=json.dumps(options, indent=2),
        )

    async def select(self, profile: OnboardingProfile) -> RoadmapSelectionResponse:
        analysis = await self.advisory.advise(self.build_prompt(profile), ROADMAP_RESPONSE_KEYS)

        selected = self.catalog.get_sprint(str(analysis["selectedRoadmapId"]))
        if selected is None:
            raise AdvisoryUnavailable(f"unknown roadmap id {analysis['selectedRoadmapId']!r}")

        alternative_ids = analysis.get("alternativeIds") or []
        if not isinstance(alternative_ids, list):
            alternative_ids = []

        alternatives = []
        for alt_id in alternative_ids:
            sprint = self.catalog.get_sprint(str(alt_id))
            if sprint is None or sprint.id == selected.id or sprint in alternatives:
                continue
            alternatives.append(sprint)
            if len(alternatives) == MAX_ALTERNATIVES:
                break

        reasoning = analysis.get("reasoning") or f"{selected.name} best matches your profile."
        logger.info(f"Advisory selected roadmap {selected.id} (confidence {analysis.get('confidenceScore')})")
        return RoadmapSelectionResponse(
            selected_roadmap=selected,
            reasoning=str(reasoning),
            alternative_options=alternatives,
            source=SOURCE_ADVISORY,
        )


class RuleBasedRoadmapSelector:
    """Exact match on primary focus, experience level and time bucket."""

    def __init__(self, catalog: RoadmapCatalog):
        self.catalog = catalog

    def choose(self, profile: OnboardingProfile) -> RoadmapSelectionResponse:
        focus = profile.primary_focus or DEFAULT_FOCUS
        experience = profile.experience_level or DEFAULT_EXPERIENCE
        time_available = profile.time_available_weekday or DEFAULT_TIME

        sprints = self.catalog.list_sprints()
        selected = next(
            (
                s for s in sprints
                if s.focus == focus
                and s.experience_level == experience
                and s.time_commitment == time_available
            ),
            sprints[0],
        )
        alternatives = [s for s in sprints if s.id != selected.id][:MAX_ALTERNATIVES]

        return RoadmapSelectionResponse(
            selected_roadmap=selected,
            reasoning=(
                f"Selected based on focus area ({focus}), experience level ({experience}), "
                f"and time availability ({time_available} minutes/day)"
            ),
            alternative_options=alternatives,
            source=SOURCE_FALLBACK,
        )

    async def select(self, profile: OnboardingProfile) -> RoadmapSelectionResponse:
        return self.choose(profile)


class FallbackRoadmapSelector(FallbackSelector):
    name = "roadmap selection"


def build_roadmap_selector(advisory: AdvisoryClient, catalog: RoadmapCatalog) -> FallbackRoadmapSelector:
    return FallbackRoadmapSelector(
        AdvisoryRoadmapSelector(advisory, catalog),
        RuleBasedRoadmapSelector(catalog),
    )
