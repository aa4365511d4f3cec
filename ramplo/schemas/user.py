from datetime import datetime
from typing import Optional

from ramplo.schemas.common import ApiModel
from ramplo.schemas.profile import ProfileResponse
from ramplo.schemas.progress import ProgressResponse


class UserResponse(ApiModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_comped: bool = False
    subscription_status: Optional[str] = None
    subscription_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AuthUserResponse(ApiModel):
    user: UserResponse
    profile: Optional[ProfileResponse] = None
    progress: Optional[ProgressResponse] = None
    has_active_subscription: bool
