from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from ramplo.db.base_class import Base

class DealCoachSession(Base):
    __tablename__ = "deal_coach_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    loan_stage = Column(String(50), nullable=True)
    loan_type = Column(String(50), nullable=True)
    borrower_scenario = Column(Text, nullable=True)
    challenges = Column(Text, nullable=True)
    urgency_level = Column(String(10), nullable=True)  # low | medium | high

    ai_response = Column(Text, nullable=True)
    source = Column(String(10), default="advisory")    # advisory | fallback

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="deal_coach_sessions")
