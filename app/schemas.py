"""
Domain records for reports, staff, settings and AI analysis.

These are plain pydantic models; persistence stores them as JSON lists
(reports, staff) or a JSON object (settings).

Report.staff_name is a copy of the staff member's name at submission time,
not a reference. Renaming a staff member never rewrites saved reports.
"""

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

from app.constants import DEFAULT_TEMPLATE, DEFAULT_WORK_HOURS, STAFF_COLORS

WorkType = Literal["standard", "flex"]
Sentiment = Literal["positive", "neutral", "concerned"]


class CategoryHours(BaseModel):
    sns: float = Field(0, ge=0)
    wix: float = Field(0, ge=0)
    design: float = Field(0, ge=0)
    other: float = Field(0, ge=0)


class CategoryTexts(BaseModel):
    sns: str = ""
    wix: str = ""
    design: str = ""
    other: str = ""


class Report(BaseModel):
    id: str
    created_at: str
    submitted_at: str
    staff_name: str
    date: str
    work_type: WorkType = "standard"
    work_hours: str = ""
    category_hours: CategoryHours = Field(default_factory=CategoryHours)
    category_texts: CategoryTexts = Field(default_factory=CategoryTexts)
    work_content: str = ""
    learnings: str = ""
    issues: str = ""
    tomorrow_schedule: str = ""
    raw_text: str = ""

    @property
    def summary_line(self) -> str:
        """First non-blank line of the work content, for list views."""
        for line in self.work_content.split("\n"):
            if line.strip():
                return line.strip()
        return ""


class Staff(BaseModel):
    id: str = ""
    name: str
    joined_at: str = ""
    color: str = STAFF_COLORS[0]

    @property
    def initial(self) -> str:
        return self.name[:1] or "?"


class Settings(BaseModel):
    staff_name: str = ""
    webhook_url: str = ""
    email_recipient: str = ""
    report_template: str = DEFAULT_TEMPLATE
    default_work_hours: str = DEFAULT_WORK_HOURS

    @field_validator("report_template", mode="before")
    @classmethod
    def _default_template(cls, value):
        return value or DEFAULT_TEMPLATE

    @field_validator("default_work_hours", mode="before")
    @classmethod
    def _default_work_hours(cls, value):
        return value or DEFAULT_WORK_HOURS

    @field_validator("staff_name", "webhook_url", "email_recipient", mode="before")
    @classmethod
    def _blank_if_missing(cls, value):
        return value or ""


class AIAnalysis(BaseModel):
    summary: str
    suggestions: List[str] = Field(default_factory=list)
    sentiment: Sentiment = "neutral"
