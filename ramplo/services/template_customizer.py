import logging
import re
from typing import Optional

from ramplo.ai.advisory import AdvisoryClient
from ramplo.ai.prompts import TEMPLATE_CUSTOMIZATION_PROMPT, build_profile_context
from ramplo.core.exceptions import AdvisoryUnavailable
from ramplo.db.models.user import User
from ramplo.schemas.profile import OnboardingProfile
from ramplo.schemas.templates import CustomizationRequest, CustomizedTemplateResponse, OutreachTemplate
from ramplo.services.selection import SOURCE_ADVISORY, SOURCE_FALLBACK

logger = logging.getLogger(__name__)

SIGN_OFF = re.compile(r"(Best regards|Sincerely)")

TONE_PREFIXES = {
    "friendly": "👋 ",
    "urgent": "⚡ ",
}


def placeholder_values(user: User, profile: Optional[OnboardingProfile]) -> dict[str, str]:
    """Placeholder -> replacement; unknown values leave the placeholder in place."""
    full_name = " ".join(p for p in (user.first_name, user.last_name) if p)
    if not full_name and profile and profile.first_name:
        full_name = profile.first_name
    city = profile.markets[0] if profile and profile.markets else None
    return {
        "[YOUR_NAME]": full_name or "[YOUR_NAME]",
        "[YOUR_EMAIL]": user.email or "[YOUR_EMAIL]",
        "[YOUR_CITY]": city or "[YOUR_CITY]",
        "[NMLS_ID]": "[NMLS_ID]",
    }


def fallback_customization(
    template: OutreachTemplate,
    user: User,
    profile: Optional[OnboardingProfile],
    request: CustomizationRequest,
) -> CustomizedTemplateResponse:
    subject = template.subject
    content = template.content
    for placeholder, value in placeholder_values(user, profile).items():
        subject = subject.replace(placeholder, value)
        content = content.replace(placeholder, value)

    points = [p.strip() for p in request.key_points.split(",") if p.strip()]
    if points:
        section = "\n\nKey highlights:\n• " + "\n• ".join(points) + "\n"
        if SIGN_OFF.search(content):
            content = SIGN_OFF.sub(lambda m: section + m.group(1), content, count=1)
        else:
            content += section

    subject = TONE_PREFIXES.get(request.tone, "") + subject
    return CustomizedTemplateResponse(subject=subject, content=content, source=SOURCE_FALLBACK)


class TemplateCustomizer:
    def __init__(self, advisory: AdvisoryClient):
        self.advisory = advisory

    async def customize(
        self,
        template: OutreachTemplate,
        user: User,
        profile: Optional[OnboardingProfile],
        request: CustomizationRequest,
    ) -> CustomizedTemplateResponse:
        context_profile = profile or OnboardingProfile(first_name=user.first_name)
        prompt = TEMPLATE_CUSTOMIZATION_PROMPT.format(
            profile_context=build_profile_context(context_profile),
            subject=template.subject,
            content=template.content,
            recipient_type=request.recipient_type or "General",
            tone=request.tone,
            key_points=request.key_points or "None specified",
        )
        try:
            result = await self.advisory.advise(prompt)
        except AdvisoryUnavailable as e:
            logger.warning(f"Template customization for {template.id} fell back to placeholders: {e}")
            return fallback_customization(template, user, profile, request)

        return CustomizedTemplateResponse(
            subject=str(result.get("subject") or template.subject),
            content=str(result.get("content") or template.content),
            source=SOURCE_ADVISORY,
        )
