from typing import Any, Literal, Optional

from pydantic import Field, field_validator

from ramplo.schemas.common import ApiModel
from ramplo.schemas.roadmap import ExperienceLevel

FocusArea = Literal["purchase", "refi", "heloc", "investor-dscr", "non-qm"]
BorrowerType = Literal["fthb", "move-up", "cash-out", "investor"]
TimeBucket = Literal["30", "60", "90+"]
OutreachComfort = Literal["low", "medium", "high"]
TonePreference = Literal["professional", "friendly", "direct"]
Channel = Literal["email", "phone", "social", "inperson"]


def _unique(values: Any) -> Any:
    if not isinstance(values, list):
        return values
    unique = []
    for value in values:
        if value not in unique:
            unique.append(value)
    return unique


class OnboardingProfile(ApiModel):
    """
    Onboarding answers as submitted by the client.

    Validated once, here, at onboarding completion. Selection still copes
    with sparse profiles (no focus, no time bucket) by falling back to
    defaults, so only shape and cardinality are enforced.
    """
    first_name: Optional[str] = Field(default=None, max_length=100)
    experience_level: Optional[ExperienceLevel] = None
    focus: list[FocusArea] = Field(default_factory=list, max_length=3)
    borrower_types: list[BorrowerType] = Field(default_factory=list, max_length=4)
    markets: list[str] = Field(default_factory=list, max_length=4)
    time_available_weekday: Optional[TimeBucket] = None
    outreach_comfort: Optional[OutreachComfort] = None
    tone_preference: Optional[TonePreference] = None
    preferred_channels: list[Channel] = Field(default_factory=list, max_length=4)
    has_past_client_list: bool = False
    goals: Optional[str] = Field(default=None, max_length=2000)

    # Repeats are dropped before the length limits apply
    @field_validator("focus", "borrower_types", "preferred_channels", mode="before")
    @classmethod
    def drop_repeats(cls, values: Any) -> Any:
        # Order matters for focus (first entry is the primary focus)
        return _unique(values)

    @field_validator("markets", mode="before")
    @classmethod
    def clean_markets(cls, values: Any) -> Any:
        if not isinstance(values, list):
            return values
        cleaned = [m.strip() if isinstance(m, str) else m for m in values]
        return _unique([m for m in cleaned if m != ""])

    @property
    def primary_focus(self) -> Optional[str]:
        return self.focus[0] if self.focus else None

    @property
    def secondary_focus(self) -> list[str]:
        return list(self.focus[1:])


class ProfileResponse(OnboardingProfile):
    onboarding_completed: bool = False
