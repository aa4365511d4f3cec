from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, date
from ramplo.db.base_class import Base

class UserProgress(Base):
    __tablename__ = "user_progress"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    # Selected roadmap and the user's cursor into it
    sprint_id = Column(String, nullable=True)
    start_date = Column(Date, default=date.today)
    current_week = Column(Integer, default=1)
    current_day = Column(Integer, default=1)

    # Counters (only ever incremented)
    tasks_completed = Column(Integer, default=0, nullable=False)
    applications_submitted = Column(Integer, default=0, nullable=False)
    loans_closed = Column(Integer, default=0, nullable=False)

    # Cached value of the derived ramp run; task + connection rows are the source of truth
    ramp_run_days = Column(Integer, default=0, nullable=False)

    last_activity_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="progress")


class DailyConnections(Base):
    __tablename__ = "daily_connections"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_connections_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)

    phone_calls = Column(Integer, default=0, nullable=False)
    text_messages = Column(Integer, default=0, nullable=False)
    emails = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def total(self) -> int:
        return (self.phone_calls or 0) + (self.text_messages or 0) + (self.emails or 0)


class DailyLoanActions(Base):
    __tablename__ = "daily_loan_actions"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_loan_actions_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)

    preapprovals = Column(Integer, default=0, nullable=False)
    applications = Column(Integer, default=0, nullable=False)
    closings = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
