from datetime import date, datetime
from typing import Optional

from pydantic import Field

from ramplo.schemas.common import ApiModel


class TaskResponse(ApiModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    estimated_minutes: Optional[int] = None
    week: int
    day: int
    completed: bool
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ConnectionCounts(ApiModel):
    phone_calls: int = Field(default=0, ge=0)
    text_messages: int = Field(default=0, ge=0)
    emails: int = Field(default=0, ge=0)


class DailyConnectionsResponse(ConnectionCounts):
    date: date


class LoanActionCounts(ApiModel):
    preapprovals: int = Field(default=0, ge=0)
    applications: int = Field(default=0, ge=0)
    closings: int = Field(default=0, ge=0)


class DailyLoanActionsResponse(LoanActionCounts):
    date: date


class ProgressResponse(ApiModel):
    sprint_id: Optional[str] = None
    start_date: Optional[date] = None
    current_week: int
    current_day: int
    tasks_completed: int
    ramp_run_days: int
    applications_submitted: int
    loans_closed: int
    last_activity_date: Optional[datetime] = None


class DashboardResponse(ApiModel):
    current_week: int
    current_day: int
    week_theme: Optional[str] = None
    today_tasks_completed: int
    today_tasks_total: int
    client_connects_today: int
    ramp_run_days: int
    loans_closed: int
    applications_submitted: int
    tasks_completed: int
