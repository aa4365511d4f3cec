import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from ramplo.ai.advisory import AdvisoryClient
from ramplo.core.exceptions import AdvisoryUnavailable
from ramplo.schemas.profile import OnboardingProfile
from ramplo.services.catalog import RoadmapCatalog
from ramplo.services.roadmap_selector import (
    AdvisoryRoadmapSelector,
    FallbackRoadmapSelector,
    RuleBasedRoadmapSelector,
    build_roadmap_selector,
)


def _advisory(result=None, error=None):
    advisory = MagicMock()
    advisory.advise = AsyncMock(return_value=result, side_effect=error)
    return advisory


@pytest.fixture
def catalog(make_sprint):
    return RoadmapCatalog([
        make_sprint("purchase-new-30", "purchase", "new", "30"),
        make_sprint("refi-new-60", "refi", "new", "60"),
        make_sprint("purchase-3plus-90", "purchase", "3+", "90+"),
        make_sprint("heloc-1to3-60", "heloc", "1-3y", "60"),
    ])


def test_rule_based_exact_match(catalog):
    profile = OnboardingProfile(experience_level="new", focus=["refi", "heloc"], time_available_weekday="60")
    result = RuleBasedRoadmapSelector(catalog).choose(profile)
    assert result.selected_roadmap.id == "refi-new-60"
    assert [s.id for s in result.alternative_options] == ["purchase-new-30", "purchase-3plus-90"]
    assert result.source == "fallback"


def test_rule_based_defaults_for_sparse_profile(catalog):
    result = RuleBasedRoadmapSelector(catalog).choose(OnboardingProfile())
    assert result.selected_roadmap.id == "purchase-new-30"
    assert "purchase" in result.reasoning
    assert "new" in result.reasoning
    assert "30" in result.reasoning


def test_rule_based_no_match_uses_first_entry(catalog):
    profile = OnboardingProfile(experience_level="<1y", focus=["non-qm"], time_available_weekday="90+")
    result = RuleBasedRoadmapSelector(catalog).choose(profile)
    assert result.selected_roadmap.id == "purchase-new-30"
    assert len(result.alternative_options) == 2
    assert all(s.id != "purchase-new-30" for s in result.alternative_options)


def test_rule_based_is_deterministic(catalog):
    profile = OnboardingProfile(experience_level="3+", focus=["purchase"], time_available_weekday="90+")
    selector = RuleBasedRoadmapSelector(catalog)
    first = selector.choose(profile)
    second = selector.choose(profile)
    assert first.selected_roadmap.id == second.selected_roadmap.id == "purchase-3plus-90"
    assert first == second


@pytest.mark.asyncio
async def test_shipped_catalog_scenario_with_failing_advisory(roadmap_catalog):
    selector = build_roadmap_selector(_advisory(error=AdvisoryUnavailable("down")), roadmap_catalog)
    profile = OnboardingProfile(experience_level="new", focus=["purchase"], time_available_weekday="60")

    result = await selector.select(profile)

    assert result.selected_roadmap.id == "foundations-newlo-60min"
    assert result.selected_roadmap.name.startswith("Foundations")
    expected_alternatives = [s.id for s in roadmap_catalog.list_sprints() if s.id != "foundations-newlo-60min"][:2]
    assert [s.id for s in result.alternative_options] == expected_alternatives
    for word in ("purchase", "new", "60"):
        assert word in result.reasoning


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    AdvisoryUnavailable("missing selectedRoadmapId"),
    asyncio.TimeoutError(),
    RuntimeError("boom"),
    KeyError("selectedRoadmapId"),
])
async def test_fallback_never_raises(catalog, error):
    selector = build_roadmap_selector(_advisory(error=error), catalog)
    result = await selector.select(OnboardingProfile(focus=["refi"], time_available_weekday="60"))
    assert catalog.get_sprint(result.selected_roadmap.id) is not None
    assert result.source == "fallback"


@pytest.mark.asyncio
async def test_advisory_selection_is_used_when_valid(catalog):
    advisory = _advisory(result={
        "selectedRoadmapId": "heloc-1to3-60",
        "reasoning": "HELOC focus with some experience",
        "alternativeIds": ["heloc-1to3-60", "refi-new-60", "unknown", "purchase-new-30", "purchase-3plus-90"],
        "confidenceScore": 0.9,
    })
    selector = build_roadmap_selector(advisory, catalog)

    result = await selector.select(OnboardingProfile(focus=["heloc"]))

    assert result.source == "advisory"
    assert result.selected_roadmap.id == "heloc-1to3-60"
    assert [s.id for s in result.alternative_options] == ["refi-new-60", "purchase-new-30"]
    assert result.reasoning == "HELOC focus with some experience"

    prompt, keys = advisory.advise.call_args.args
    assert "purchase-new-30" in prompt
    assert "Primary Focus: heloc" in prompt
    assert "selectedRoadmapId" in keys


@pytest.mark.asyncio
async def test_unknown_advisory_id_falls_back(catalog):
    advisory = _advisory(result={
        "selectedRoadmapId": "made-up",
        "reasoning": "x",
        "alternativeIds": [],
        "confidenceScore": 0.5,
    })
    with pytest.raises(AdvisoryUnavailable):
        await AdvisoryRoadmapSelector(advisory, catalog).select(OnboardingProfile())

    result = await build_roadmap_selector(advisory, catalog).select(OnboardingProfile())
    assert result.source == "fallback"
    assert result.selected_roadmap.id == "purchase-new-30"


@pytest.mark.asyncio
async def test_fallback_decorator_delegates_without_network(catalog):
    primary = MagicMock()
    primary.select = AsyncMock(side_effect=ConnectionError("no network"))
    selector = FallbackRoadmapSelector(primary, RuleBasedRoadmapSelector(catalog))

    result = await selector.select(OnboardingProfile(focus=["refi"], time_available_weekday="60"))

    primary.select.assert_awaited_once()
    assert result.selected_roadmap.id == "refi-new-60"


def _real_advisory(content):
    advisory = AdvisoryClient(api_key="test-key", model="primary-model", fallback_model="fallback-model")
    mock_client = AsyncMock()
    mock_client.chat.completions.create.return_value = MagicMock(
        choices=[MagicMock(message=MagicMock(content=content))]
    )
    advisory.async_client = mock_client
    return advisory


@pytest.mark.asyncio
async def test_advisory_answer_with_only_a_roadmap_id_is_accepted(catalog):
    advisory = _real_advisory(json.dumps({"selectedRoadmapId": "heloc-1to3-60", "reasoning": "Equity focus"}))

    result = await build_roadmap_selector(advisory, catalog).select(OnboardingProfile(focus=["refi"]))

    assert result.source == "advisory"
    assert result.selected_roadmap.id == "heloc-1to3-60"
    assert result.reasoning == "Equity focus"
    assert result.alternative_options == []


@pytest.mark.asyncio
async def test_advisory_answer_without_reasoning_gets_default_text(catalog):
    advisory = _real_advisory(json.dumps({"selectedRoadmapId": "refi-new-60"}))

    result = await build_roadmap_selector(advisory, catalog).select(OnboardingProfile())

    assert result.source == "advisory"
    assert result.reasoning.startswith(catalog.get_sprint("refi-new-60").name)
