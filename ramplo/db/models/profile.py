from sqlalchemy import Column, Integer, String, ForeignKey, JSON, DateTime, Text, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from ramplo.db.base_class import Base

class UserProfile(Base):
    """
    Onboarding answers. Written once when onboarding completes; the
    cardinality rules (focus <= 3, markets <= 4, ...) are enforced by
    OnboardingProfile before anything reaches this table.
    """
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    first_name = Column(String, nullable=True)
    markets = Column(JSON, default=list)            # cities / market areas

    # --- Experience & Focus ---
    experience_level = Column(String(10), nullable=True)    # new | <1y | 1-3y | 3+
    focus = Column(JSON, default=list)                      # ordered, primary first
    borrower_types = Column(JSON, default=list)             # fthb, move-up, cash-out, investor

    # --- Time & Comfort ---
    time_available_weekday = Column(String(10), nullable=True)  # 30 | 60 | 90+
    outreach_comfort = Column(String(10), nullable=True)        # low | medium | high

    # --- Network & Communication ---
    has_past_client_list = Column(Boolean, default=False)
    tone_preference = Column(String(20), nullable=True)         # professional | friendly | direct
    preferred_channels = Column(JSON, default=list)             # email, phone, social, inperson

    goals = Column(Text, nullable=True)
    onboarding_completed = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="profile")
