from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from ramplo.db.base_class import Base

class User(Base):
    __tablename__ = "users"

    # --- Identity ---
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # --- Subscription (paywall) ---
    # Comped accounts (partner email domains) bypass the paywall entirely
    is_comped = Column(Boolean, default=False)
    subscription_status = Column(String(20), nullable=True) # active | past_due | canceled
    subscription_end_date = Column(DateTime, nullable=True)
    is_recurring = Column(Boolean, default=False)

    # --- Relationships ---
    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    progress = relationship("UserProgress", back_populates="user", uselist=False, cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")
    deal_coach_sessions = relationship("DealCoachSession", back_populates="user", cascade="all, delete-orphan")
