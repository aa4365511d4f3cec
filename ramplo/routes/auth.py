from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ramplo.core.auth_guard import get_current_user
from ramplo.db.crud.progress import get_user_progress
from ramplo.db.crud.users import get_profile
from ramplo.db.models.user import User
from ramplo.db.session import get_db
from ramplo.middleware.subscription import check_subscription_status
from ramplo.schemas.profile import ProfileResponse
from ramplo.schemas.progress import ProgressResponse
from ramplo.schemas.user import AuthUserResponse, UserResponse

router = APIRouter()


# Not behind the paywall: the client needs it to decide whether to show the paywall
@router.get("/api/auth/user", response_model=AuthUserResponse)
def read_current_user(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    profile = get_profile(db, user.id)
    progress = get_user_progress(db, user.id)
    return AuthUserResponse(
        user=UserResponse.model_validate(user),
        profile=ProfileResponse.model_validate(profile) if profile else None,
        progress=ProgressResponse.model_validate(progress) if progress else None,
        has_active_subscription=check_subscription_status(user),
    )
