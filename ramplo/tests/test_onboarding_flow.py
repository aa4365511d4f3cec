from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport
from pydantic import ValidationError

from ramplo.core.exceptions import AdvisoryUnavailable, AlreadyOnboarded
from ramplo.db.crud.progress import get_user_progress
from ramplo.db.crud.tasks import get_tasks
from ramplo.db.crud.users import get_profile
from ramplo.schemas.profile import OnboardingProfile
from ramplo.services.onboarding import complete_onboarding, is_onboarded, load_profile
from ramplo.services.roadmap_selector import build_roadmap_selector

PROFILE = {
    "firstName": "Dana",
    "experienceLevel": "new",
    "focus": ["purchase", "heloc"],
    "borrowerTypes": ["fthb"],
    "markets": ["Austin", " Round Rock "],
    "timeAvailableWeekday": "60",
    "outreachComfort": "medium",
    "tonePreference": "friendly",
    "preferredChannels": ["email", "phone"],
    "hasPastClientList": True,
    "goals": "Close 3 loans",
}


def _failing_selector(catalog):
    advisory = MagicMock()
    advisory.advise = AsyncMock(side_effect=AdvisoryUnavailable("down"))
    return build_roadmap_selector(advisory, catalog)


def test_profile_validation_rules():
    profile = OnboardingProfile.model_validate(PROFILE)
    assert profile.primary_focus == "purchase"
    assert profile.secondary_focus == ["heloc"]
    assert profile.markets == ["Austin", "Round Rock"]

    assert OnboardingProfile(focus=["refi", "refi", "heloc"]).focus == ["refi", "heloc"]

    with pytest.raises(ValidationError):
        OnboardingProfile(focus=["purchase", "refi", "heloc", "non-qm"])
    with pytest.raises(ValidationError):
        OnboardingProfile(markets=["a", "b", "c", "d", "e"])
    with pytest.raises(ValidationError):
        OnboardingProfile(time_available_weekday="45")


def test_repeats_do_not_count_toward_list_limits():
    profile = OnboardingProfile(
        focus=["refi", "refi", "heloc", "purchase"],
        markets=["Austin", " Austin ", "Dallas", "", "Houston", "Austin", "El Paso"],
        preferred_channels=["email", "email", "phone", "social", "inperson"],
    )
    assert profile.focus == ["refi", "heloc", "purchase"]
    assert profile.primary_focus == "refi"
    assert profile.markets == ["Austin", "Dallas", "Houston", "El Paso"]
    assert profile.preferred_channels == ["email", "phone", "social", "inperson"]

    with pytest.raises(ValidationError):
        OnboardingProfile(focus=["refi", "heloc", "purchase", "non-qm", "refi"])
    with pytest.raises(ValidationError):
        OnboardingProfile(focus=["refi", "bogus"])


@pytest.mark.asyncio
async def test_complete_onboarding_materializes_selected_sprint(db, user, roadmap_catalog):
    profile = OnboardingProfile.model_validate(PROFILE)

    selection = await complete_onboarding(db, user, profile, _failing_selector(roadmap_catalog), date(2025, 3, 3))

    sprint = selection.selected_roadmap
    assert sprint.id == "foundations-newlo-60min"
    assert len(get_tasks(db, user.id)) == len(list(sprint.iter_tasks()))
    progress = get_user_progress(db, user.id)
    assert progress.sprint_id == sprint.id
    assert progress.start_date == date(2025, 3, 3)
    assert is_onboarded(db, user.id)
    assert load_profile(db, user.id) == profile


@pytest.mark.asyncio
async def test_second_onboarding_is_rejected_without_new_tasks(db, user, roadmap_catalog):
    selector = _failing_selector(roadmap_catalog)
    profile = OnboardingProfile.model_validate(PROFILE)
    await complete_onboarding(db, user, profile, selector, date(2025, 3, 3))
    count = len(get_tasks(db, user.id))

    with pytest.raises(AlreadyOnboarded):
        await complete_onboarding(db, user, profile, selector, date(2025, 3, 4))

    assert len(get_tasks(db, user.id)) == count
    assert get_profile(db, user.id).goals == "Close 3 loans"


@pytest.mark.asyncio
async def test_onboarding_route_then_repeat_is_conflict(app, db, user, auth_headers):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        first = await client.post("/api/onboarding", json=PROFILE, headers=auth_headers(user))
        assert first.status_code == 201
        body = first.json()
        assert body["selectedRoadmap"]["id"] == "foundations-newlo-60min"
        assert body["source"] == "fallback"
        assert "60" in body["reasoning"]
        count = len(get_tasks(db, user.id))
        assert count > 0

        second = await client.post("/api/onboarding", json=PROFILE, headers=auth_headers(user))
        assert second.status_code == 409
        assert len(get_tasks(db, user.id)) == count


@pytest.mark.asyncio
async def test_onboarding_route_rejects_bad_payload(app, db, user, auth_headers):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/onboarding",
            json={**PROFILE, "focus": ["purchase", "refi", "heloc", "non-qm"]},
            headers=auth_headers(user),
        )
    assert response.status_code == 422
    assert get_tasks(db, user.id) == []
