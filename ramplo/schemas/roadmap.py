"""Read-only roadmap catalog entries (sprints, weeks, daily task templates)."""
from typing import Any, Iterator, Literal, Optional

from pydantic import ConfigDict, Field, PositiveInt, model_validator

from ramplo.schemas.common import ApiModel

ExperienceLevel = Literal["new", "<1y", "1-3y", "3+"]

BUSINESS_DAYS_PER_WEEK = 5


class CatalogModel(ApiModel):
    model_config = ConfigDict(frozen=True)


class DayTaskTemplate(CatalogModel):
    week: PositiveInt
    day: int = Field(ge=1, le=BUSINESS_DAYS_PER_WEEK)
    title: str = Field(min_length=1)
    description: str = ""
    category: str = ""
    estimated_minutes: PositiveInt


class WeekTemplate(CatalogModel):
    week: PositiveInt
    theme: str = ""
    tasks: list[DayTaskTemplate] = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def carry_week_number(cls, data: Any) -> Any:
        # Task entries may omit their week; it is always the parent's.
        if isinstance(data, dict) and isinstance(data.get("tasks"), list):
            week = data.get("week")
            data = dict(data)
            data["tasks"] = [
                {**t, "week": t.get("week", week)} if isinstance(t, dict) else t
                for t in data["tasks"]
            ]
        return data

    @model_validator(mode="after")
    def check_task_weeks(self) -> "WeekTemplate":
        for task in self.tasks:
            if task.week != self.week:
                raise ValueError(
                    f"task '{task.title}' is numbered week {task.week} inside week {self.week}"
                )
        return self

    def tasks_for_day(self, day: int) -> list[DayTaskTemplate]:
        return [t for t in self.tasks if t.day == day]


class SprintTemplate(CatalogModel):
    id: str = Field(min_length=1)
    name: str
    focus: str
    experience_level: ExperienceLevel
    time_commitment: str
    description: str = ""
    weeks: list[WeekTemplate] = Field(min_length=1)

    @model_validator(mode="after")
    def check_week_numbering(self) -> "SprintTemplate":
        numbers = [w.week for w in self.weeks]
        if numbers != list(range(1, len(numbers) + 1)):
            raise ValueError(
                f"sprint '{self.id}' weeks must be numbered 1..{len(numbers)} in order, got {numbers}"
            )
        return self

    @property
    def total_weeks(self) -> int:
        return len(self.weeks)

    def iter_tasks(self) -> Iterator[DayTaskTemplate]:
        for week in self.weeks:
            yield from week.tasks

    def get_week(self, week: int) -> Optional[WeekTemplate]:
        if 1 <= week <= len(self.weeks):
            return self.weeks[week - 1]
        return None

    def summary(self) -> dict:
        """Compact description used for the advisory options list."""
        return {
            "id": self.id,
            "name": self.name,
            "focus": self.focus,
            "experienceLevel": self.experience_level,
            "timeCommitment": self.time_commitment,
            "description": self.description,
        }


class RoadmapCatalogData(CatalogModel):
    version: str
    sprints: list[SprintTemplate] = Field(min_length=1)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "RoadmapCatalogData":
        ids = [s.id for s in self.sprints]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate sprint ids: {', '.join(duplicates)}")
        return self


class SprintSummary(ApiModel):
    id: str
    name: str
    focus: str
    experience_level: str
    time_commitment: str
    description: str
    total_weeks: int
    total_tasks: int


class RoadmapSelectionResponse(ApiModel):
    selected_roadmap: SprintTemplate
    reasoning: str
    alternative_options: list[SprintTemplate]
    source: str
