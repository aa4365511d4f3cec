import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ramplo.core.exceptions import AlreadyOnboarded
from ramplo.db.crud.users import get_profile
from ramplo.db.models.profile import UserProfile
from ramplo.db.models.user import User
from ramplo.schemas.profile import OnboardingProfile
from ramplo.schemas.roadmap import RoadmapSelectionResponse
from ramplo.services.materializer import materialize, start_program

logger = logging.getLogger(__name__)


def is_onboarded(db: Session, user_id: int) -> bool:
    profile = get_profile(db, user_id)
    return bool(profile and profile.onboarding_completed)


def load_profile(db: Session, user_id: int) -> Optional[OnboardingProfile]:
    """The stored onboarding answers as the validated input model."""
    row = get_profile(db, user_id)
    if row is None:
        return None
    return OnboardingProfile.model_validate(row)


async def complete_onboarding(
    db: Session,
    user: User,
    profile_in: OnboardingProfile,
    selector,
    today: date,
) -> RoadmapSelectionResponse:
    """
    Stores the profile, picks a roadmap and materializes it.

    Runs at most once per user: a user who already has a profile gets
    ``AlreadyOnboarded`` and nothing is written, so tasks are never
    materialized twice. The selector is expected to always answer (it
    falls back to rule-based selection on its own).
    """
    if get_profile(db, user.id) is not None:
        raise AlreadyOnboarded(user.id)

    selection = await selector.select(profile_in)
    sprint = selection.selected_roadmap

    db.add(UserProfile(
        user_id=user.id,
        onboarding_completed=True,
        **profile_in.model_dump(),
    ))
    if profile_in.first_name and not user.first_name:
        user.first_name = profile_in.first_name

    # Profile, progress row and tasks are committed together
    start_program(db, user.id, sprint, today, commit=False)
    materialize(db, user.id, sprint, commit=False)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent onboarding inserted the profile first
        db.rollback()
        raise AlreadyOnboarded(user.id)

    logger.info(f"User {user.id} onboarded onto roadmap {sprint.id} ({selection.source})")
    return selection
