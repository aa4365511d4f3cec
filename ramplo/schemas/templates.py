from datetime import datetime
from typing import Literal, Optional

from pydantic import ConfigDict, Field, model_validator

from ramplo.schemas.common import ApiModel


class OutreachTemplate(ApiModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    category: str                  # prospecting, follow-up, nurture, referral
    focus: list[str]               # loan types the template works for
    borrower_types: list[str]
    subject: str
    content: str
    tone: str                      # professional, friendly, direct
    description: str = ""

    def summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "focus": self.focus,
            "borrowerTypes": self.borrower_types,
            "tone": self.tone,
            "description": self.description,
        }


class TemplateCatalogData(ApiModel):
    model_config = ConfigDict(frozen=True)

    version: str
    templates: list[OutreachTemplate] = Field(min_length=1)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "TemplateCatalogData":
        ids = [t.id for t in self.templates]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate template ids: {', '.join(duplicates)}")
        return self


class TemplateSelectRequest(ApiModel):
    limit: int = Field(default=5, ge=1, le=20)


class TemplateSelectionResponse(ApiModel):
    selected_templates: list[OutreachTemplate]
    reasoning: str
    source: str


class CustomizationRequest(ApiModel):
    recipient_type: str = Field(default="", max_length=100)
    tone: str = Field(default="professional", max_length=30)
    key_points: str = Field(default="", max_length=2000)


class CustomizedTemplateResponse(ApiModel):
    subject: str
    content: str
    source: str


class DealCoachRequest(ApiModel):
    loan_stage: Optional[str] = Field(default=None, max_length=50)
    loan_type: Optional[str] = Field(default=None, max_length=50)
    borrower_scenario: Optional[str] = Field(default=None, max_length=4000)
    challenges: Optional[str] = Field(default=None, max_length=4000)
    urgency_level: Optional[Literal["low", "medium", "high"]] = None


class DealCoachSessionResponse(DealCoachRequest):
    id: int
    ai_response: Optional[str] = None
    source: str
    created_at: Optional[datetime] = None
