from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient, ASGITransport

from ramplo.db.crud.users import create_user
from ramplo.middleware.subscription import check_subscription_status

NOW = datetime(2025, 3, 3, 12, 0)


def _make(db, email="lo@example.com", age_days=30, **fields):
    user = create_user(db, email, comped_domains=["morty.com"], **fields)
    user.created_at = NOW - timedelta(days=age_days)
    db.commit()
    return user


def test_trial_window(db):
    assert check_subscription_status(_make(db, "new@example.com", age_days=2), now=NOW, trial_days=7)
    assert not check_subscription_status(_make(db, "old@example.com", age_days=8), now=NOW, trial_days=7)


def test_comped_domain_always_passes(db):
    user = _make(db, "partner@morty.com", age_days=400)
    assert user.is_comped
    assert check_subscription_status(user, now=NOW, trial_days=7)


def test_active_subscription(db):
    future = _make(db, "a@example.com", subscription_status="active", subscription_end_date=NOW + timedelta(days=10))
    expired = _make(db, "b@example.com", subscription_status="active", subscription_end_date=NOW - timedelta(days=1))
    recurring = _make(db, "c@example.com", subscription_status="active", is_recurring=True)
    canceled = _make(db, "d@example.com", subscription_status="canceled", is_recurring=True)

    assert check_subscription_status(future, now=NOW, trial_days=7)
    assert not check_subscription_status(expired, now=NOW, trial_days=7)
    assert check_subscription_status(recurring, now=NOW, trial_days=7)
    assert not check_subscription_status(canceled, now=NOW, trial_days=7)


@pytest.mark.asyncio
async def test_protected_routes_return_402_after_trial(app, db, auth_headers):
    user = create_user(db, "lapsed@example.com")
    user.created_at = datetime.utcnow() - timedelta(days=60)
    db.commit()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        blocked = await client.get("/api/tasks", headers=auth_headers(user))
        me = await client.get("/api/auth/user", headers=auth_headers(user))

    assert blocked.status_code == 402
    assert me.status_code == 200
    assert me.json()["hasActiveSubscription"] is False


@pytest.mark.asyncio
async def test_missing_token_is_401(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/dashboard")
        bad = await client.get("/api/dashboard", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert bad.status_code == 401
