from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Boolean, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from ramplo.db.base_class import Base

class Task(Base):
    """
    A user's copy of one roadmap task. Content is snapshotted at
    materialization time and never re-derived from the catalog.
    """
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_week_day", "user_id", "week", "day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)  # networking, branding, research, ...
    estimated_minutes = Column(Integer, nullable=True)

    week = Column(Integer, nullable=False)  # 1..N
    day = Column(Integer, nullable=False)   # 1..5 (business days)

    completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="tasks")
