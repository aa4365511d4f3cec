"""
Deal coach: short, actionable advice on a live loan.

Advice comes from the advisory service when it answers, otherwise from a
fixed checklist picked by the loan stage and the keywords in the
challenge. Every session is stored with the source of its advice.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ramplo.ai.advisory import AdvisoryClient
from ramplo.ai.prompts import DEAL_COACH_PROMPT, build_profile_context
from ramplo.core.exceptions import AdvisoryUnavailable
from ramplo.db.models.coaching import DealCoachSession
from ramplo.schemas.profile import OnboardingProfile
from ramplo.schemas.templates import DealCoachRequest
from ramplo.services.selection import SOURCE_ADVISORY, SOURCE_FALLBACK

logger = logging.getLogger(__name__)

STAGE_OPENERS = {
    "prospect": "• Confirm the borrower's goal, timeline and price range before quoting anything",
    "preapproval": "• Pull credit and collect income and asset documents before issuing the preapproval",
    "application": "• Send the borrower a written list of every outstanding document with a due date",
    "processing": "• Check in with processing daily and clear open conditions the same day they appear",
    "underwriting": "• Review the conditions list with the borrower and assign an owner to each item",
    "closing": "• Confirm the closing date, cash to close and wire instructions with every party",
}

CHALLENGE_ADVICE = {
    "credit": (
        "• Review credit report for errors and disputes\n"
        "• Suggest paying down balances to improve utilization\n"
        "• Explore alternative loan programs with flexible requirements\n"
        "• Consider adding a creditworthy co-borrower"
    ),
    "income": (
        "• Request additional documentation like tax returns and bank statements\n"
        "• Consider alternative income documentation if self-employed\n"
        "• Calculate debt-to-income ratio excluding certain debts\n"
        "• Look into programs allowing gift funds or down payment assistance"
    ),
    "appraisal": (
        "• Review appraisal for factual errors or missing comparable sales\n"
        "• Request reconsideration of value with additional comps\n"
        "• Discuss increasing down payment to meet loan-to-value requirements\n"
        "• Explore loan programs with more flexible appraisal standards"
    ),
    "default": (
        "• Communicate regularly with all parties to keep deal moving\n"
        "• Document everything and maintain detailed notes\n"
        "• Consider alternative loan programs or lenders\n"
        "• Set realistic expectations about timing and potential issues"
    ),
}

CHALLENGE_KEYWORDS = (
    ("credit", ("credit", "score")),
    ("income", ("income", "employment", "dti")),
    ("appraisal", ("appraisal", "value", "ltv")),
)


def fallback_advice(request: DealCoachRequest, profile: Optional[OnboardingProfile]) -> str:
    challenge = (request.challenges or "").lower()
    topic = next(
        (name for name, words in CHALLENGE_KEYWORDS if any(w in challenge for w in words)),
        "default",
    )

    lines = []
    opener = STAGE_OPENERS.get((request.loan_stage or "").lower())
    if opener:
        lines.append(opener)
    lines.append(CHALLENGE_ADVICE[topic])
    if request.urgency_level == "high":
        lines.append("• Call the borrower today rather than emailing, and agree on the next deadline")
    if profile and profile.experience_level in ("new", "<1y"):
        lines.append("• Consult with your manager or experienced colleagues for guidance")
    return "\n".join(lines)


class DealCoach:
    def __init__(self, advisory: AdvisoryClient):
        self.advisory = advisory

    async def coach(
        self,
        db: Session,
        user_id: int,
        profile: Optional[OnboardingProfile],
        request: DealCoachRequest,
    ) -> DealCoachSession:
        prompt = DEAL_COACH_PROMPT.format(
            profile_context=build_profile_context(profile or OnboardingProfile()),
            loan_stage=request.loan_stage or "Not specified",
            loan_type=request.loan_type or "Not specified",
            urgency_level=request.urgency_level or "Not specified",
            borrower_scenario=request.borrower_scenario or "Not specified",
            challenges=request.challenges or "Not specified",
        )
        try:
            advice = await self.advisory.advise_text(prompt)
            source = SOURCE_ADVISORY
        except AdvisoryUnavailable as e:
            logger.warning(f"Deal coach for user {user_id} using checklist fallback: {e}")
            advice = fallback_advice(request, profile)
            source = SOURCE_FALLBACK

        session = DealCoachSession(
            user_id=user_id,
            ai_response=advice,
            source=source,
            **request.model_dump(),
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        return session


def list_sessions(db: Session, user_id: int, limit: int = 20) -> list[DealCoachSession]:
    return (
        db.query(DealCoachSession)
        .filter(DealCoachSession.user_id == user_id)
        .order_by(DealCoachSession.created_at.desc(), DealCoachSession.id.desc())
        .limit(limit)
        .all()
    )
