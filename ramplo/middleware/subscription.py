from datetime import datetime
from typing import Optional

from fastapi import Depends, HTTPException, status

from ramplo.core.auth_guard import get_current_user
from ramplo.core.config import settings
from ramplo.db.models.user import User


def check_subscription_status(user: User, now: Optional[datetime] = None, trial_days: Optional[int] = None) -> bool:
    """
    Returns True if the user may use the app.
    Comped accounts always pass; otherwise an active subscription or an
    unexpired trial is required.
    """
    now = now or datetime.utcnow()
    trial_days = settings.TRIAL_DAYS if trial_days is None else trial_days

    # 1. Partner accounts
    if user.is_comped:
        return True

    # 2. Active subscriber
    if user.subscription_status == "active":
        if user.subscription_end_date and user.subscription_end_date > now:
            return True
        elif user.is_recurring:
            return True

    # 3. Trial
    if user.created_at and (now - user.created_at).days < trial_days:
        return True

    return False


def require_active_subscription(user: User = Depends(get_current_user)) -> User:
    if not check_subscription_status(user):
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="Your trial has ended. Subscribe to keep using RampLO."
        )
    return user
