import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from ramplo.ai.advisory import AdvisoryClient
from ramplo.core.exceptions import AdvisoryUnavailable
from ramplo.schemas.profile import OnboardingProfile
from ramplo.services.template_selector import RuleBasedTemplateSelector, build_template_selector


def _advisory(result=None, error=None):
    advisory = MagicMock()
    advisory.advise = AsyncMock(return_value=result, side_effect=error)
    return advisory


def test_fallback_matches_focus_borrower_type_or_tone(template_catalog):
    profile = OnboardingProfile(focus=["refi"], borrower_types=["investor"], tone_preference="direct")
    result = RuleBasedTemplateSelector(template_catalog).choose(profile, limit=20)
    ids = [t.id for t in result.selected_templates]
    # refi focus, investor borrower type, past-client template lists both
    assert ids == ["refi-rate-watch", "investor-dscr-intro", "past-client-referral-ask"]
    assert result.source == "fallback"


def test_fallback_defaults_to_purchase_and_professional(template_catalog):
    result = RuleBasedTemplateSelector(template_catalog).choose(OnboardingProfile(), limit=20)
    ids = [t.id for t in result.selected_templates]
    assert ids == [
        "realtor-partner-intro",
        "fthb-preapproval-nudge",
        "investor-dscr-intro",
        "past-client-referral-ask",
    ]
    assert "purchase" in result.reasoning
    assert "professional" in result.reasoning


@pytest.mark.parametrize("limit", [1, 2, 3])
def test_fallback_truncates_to_limit(template_catalog, limit):
    profile = OnboardingProfile(borrower_types=["fthb", "move-up", "cash-out", "investor"])
    result = RuleBasedTemplateSelector(template_catalog).choose(profile, limit=limit)
    assert len(result.selected_templates) == limit


@pytest.mark.asyncio
async def test_failing_advisory_uses_fallback(template_catalog):
    selector = build_template_selector(_advisory(error=AdvisoryUnavailable("quota")), template_catalog)
    result = await selector.select(OnboardingProfile(focus=["heloc"]), limit=2)
    assert result.source == "fallback"
    assert len(result.selected_templates) <= 2


@pytest.mark.asyncio
async def test_advisory_ids_are_resolved_in_catalog_order(template_catalog):
    advisory = _advisory(result={
        "selectedTemplateIds": ["past-client-referral-ask", "ghost", "heloc-homeowner-intro"],
        "reasoning": "Equity-rich past clients",
    })
    result = await build_template_selector(advisory, template_catalog).select(OnboardingProfile(), limit=5)
    assert result.source == "advisory"
    assert [t.id for t in result.selected_templates] == ["heloc-homeowner-intro", "past-client-referral-ask"]
    assert result.reasoning == "Equity-rich past clients"


@pytest.mark.asyncio
async def test_advisory_with_no_known_ids_falls_back(template_catalog):
    advisory = _advisory(result={"selectedTemplateIds": ["ghost"], "reasoning": "?"})
    result = await build_template_selector(advisory, template_catalog).select(OnboardingProfile(), limit=5)
    assert result.source == "fallback"
    assert result.selected_templates


@pytest.mark.asyncio
async def test_advisory_answer_without_reasoning_is_accepted(template_catalog):
    advisory = AdvisoryClient(api_key="test-key", model="primary-model", fallback_model="fallback-model")
    advisory.async_client = AsyncMock()
    advisory.async_client.chat.completions.create.return_value = MagicMock(
        choices=[MagicMock(message=MagicMock(content=json.dumps({"selectedTemplateIds": ["refi-rate-watch"]})))]
    )

    result = await build_template_selector(advisory, template_catalog).select(OnboardingProfile(), limit=3)

    assert result.source == "advisory"
    assert [t.id for t in result.selected_templates] == ["refi-rate-watch"]
    assert result.reasoning == ""
