"""
Report Lifecycle Service

Turns submitted form state into a saved Report:

1. A staff member must be selected
2. Category hours must reconcile with the day's total (see hours.py)
3. The report text is rendered from the settings template
4. New reports are prepended to history; edited reports are replaced in
   place, keeping their id and original timestamps

The full report list is written back on every save.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from app.constants import CATEGORY_KEYS, SHIFT_OPTIONS
from app.schemas import CategoryHours, CategoryTexts, Report, Settings, Staff
from app.services.hours import (
    DEFAULT_FLEX_TOTAL,
    calculate_flex_total,
    coerce_hours,
    format_hours,
    parse_flex_total,
    sum_category_hours,
    target_hours,
)
from app.services.report_template import (
    build_work_content,
    flex_hours_text,
    format_report_date,
    render_report,
)
from app.services.storage import Repository
from app.services.validators import (
    ReportNotFoundError,
    ValidationError,
    validate_hours_reconcile,
    validate_report_date,
    validate_staff_selected,
)
from app.template_config import get_app_tz, submitted_stamp, utc_now

logger = logging.getLogger(__name__)


class FlexDetails(BaseModel):
    start: str = "10:00"
    end: str = "19:00"
    core: str = "11:00〜15:00"
    break_hours: str = "1.0"
    total: str = DEFAULT_FLEX_TOTAL


class CategoryEntry(BaseModel):
    text: str = ""
    hours: float = 0


def _empty_categories() -> Dict[str, CategoryEntry]:
    return {key: CategoryEntry() for key in CATEGORY_KEYS}


class ReportForm(BaseModel):
    """Editable state of the report form."""

    staff_name: str = ""
    date: str = ""
    work_type: str = "standard"
    work_hours: str = ""
    flex: FlexDetails = Field(default_factory=FlexDetails)
    categories: Dict[str, CategoryEntry] = Field(default_factory=_empty_categories)
    learnings: str = ""
    issues: str = ""
    tomorrow_schedule: str = ""

    @property
    def category_hours(self) -> Dict[str, float]:
        return {key: entry.hours for key, entry in self.categories.items()}

    @property
    def current_total(self) -> float:
        return sum_category_hours(self.category_hours)

    @property
    def is_custom_shift(self) -> bool:
        return self.work_hours not in SHIFT_OPTIONS

    @classmethod
    def from_form_data(cls, data: Mapping[str, str]) -> "ReportForm":
        """
        Build form state from posted HTML form fields.

        Shift: "work_hours" holds the selected preset; an empty selection
        means the "custom_work_hours" text box is used instead.
        Categories: "<key>_text" / "<key>_hours" for each category.
        Flex: "flex_start", "flex_end", "flex_core", "flex_break".
        """
        work_hours = (data.get("work_hours") or "").strip()
        if not work_hours:
            work_hours = (data.get("custom_work_hours") or "").strip()

        categories = {}
        for key in CATEGORY_KEYS:
            hours = max(0.0, coerce_hours(data.get(f"{key}_hours")))
            categories[key] = CategoryEntry(text=data.get(f"{key}_text") or "", hours=hours)

        flex = FlexDetails(
            start=data.get("flex_start") or FlexDetails().start,
            end=data.get("flex_end") or FlexDetails().end,
            core=data.get("flex_core") or "",
            break_hours=data.get("flex_break") or "0",
            total=data.get("flex_total") or DEFAULT_FLEX_TOTAL,
        )

        return cls(
            staff_name=(data.get("staff_name") or "").strip(),
            date=data.get("date") or "",
            work_type="flex" if data.get("work_type") == "flex" else "standard",
            work_hours=work_hours,
            flex=flex,
            categories=categories,
            learnings=data.get("learnings") or "",
            issues=data.get("issues") or "",
            tomorrow_schedule=data.get("tomorrow_schedule") or "",
        )


def local_today() -> date:
    return datetime.now(get_app_tz()).date()


def new_report_form(
    settings: Settings,
    staffs: List[Staff],
    preselected_staff: Optional[str] = None,
    today: Optional[date] = None,
) -> ReportForm:
    """Blank form for a new report; defaults to the first registered staff member."""
    staff_name = preselected_staff or (staffs[0].name if staffs else "")
    return ReportForm(
        staff_name=staff_name,
        date=(today or local_today()).isoformat(),
        work_hours=settings.default_work_hours,
    )


def form_from_report(report: Report, settings: Settings) -> ReportForm:
    """Pre-populate the form for editing an existing report."""
    hours = report.category_hours.model_dump()
    texts = report.category_texts.model_dump()
    categories = {
        key: CategoryEntry(text=texts.get(key, ""), hours=hours.get(key, 0))
        for key in CATEGORY_KEYS
    }

    flex = FlexDetails()
    if report.work_type == "flex":
        flex.total = parse_flex_total(report.work_hours)
        work_hours = settings.default_work_hours
    else:
        work_hours = report.work_hours or settings.default_work_hours

    return ReportForm(
        staff_name=report.staff_name,
        date=report.date,
        work_type=report.work_type,
        work_hours=work_hours,
        flex=flex,
        categories=categories,
        learnings=report.learnings,
        issues=report.issues,
        tomorrow_schedule=report.tomorrow_schedule,
    )


def refresh_flex_total(form: ReportForm) -> ReportForm:
    """Recompute the flex total from start, end and break."""
    if form.work_type != "flex":
        return form
    try:
        total = calculate_flex_total(form.flex.start, form.flex.end, form.flex.break_hours)
    except ValueError as e:
        raise ValidationError(
            f"勤務時間の形式が正しくありません: {e}", code="invalid_time"
        ) from e
    form.flex.total = f"{total:.1f}"
    return form


def validate_report_form(form: ReportForm) -> float:
    """
    Run submission checks in order and return the reconciled target hours.

    Raises:
        ValidationError: missing_staff, invalid_date, invalid_time or hours_mismatch
    """
    validate_staff_selected(form.staff_name)
    validate_report_date(form.date)
    refresh_flex_total(form)
    target = target_hours(form.work_type, form.work_hours, form.flex.total)
    validate_hours_reconcile(form.current_total, target)
    return target


def display_work_hours(form: ReportForm) -> str:
    """Hours string stored on the report: the shift text, or "8.0h (Flex)"."""
    if form.work_type == "flex":
        return f"{form.flex.total}h (Flex)"
    return form.work_hours


def generate_report_text(form: ReportForm, template: str) -> str:
    """Render the report body from the settings template."""
    if form.work_type == "flex":
        f = form.flex
        hours_text = flex_hours_text(f.total, f.start, f.end, f.core, f.break_hours)
    else:
        hours_text = form.work_hours

    return render_report(
        template,
        {
            "date": format_report_date(form.date),
            "work_hours": hours_text,
            "work_content": build_work_content(
                {key: entry.model_dump() for key, entry in form.categories.items()}
            ),
            "learnings": form.learnings,
            "issues": form.issues,
            "tomorrow_schedule": form.tomorrow_schedule,
        },
    )


def submit_report(
    repository: Repository,
    form: ReportForm,
    settings: Settings,
    editing_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Report:
    """
    Validate, render and persist a report.

    Args:
        repository: Storage for the report collection
        form: Submitted form state
        settings: Supplies the report template
        editing_id: Id of the report being edited, None for a new report
        now: Submission time (defaults to utc_now())

    Returns:
        The saved Report

    Raises:
        ValidationError: the form failed validation; nothing is saved
        ReportNotFoundError: editing_id does not match a saved report
    """
    validate_report_form(form)

    reports = repository.get_reports()
    existing = None
    if editing_id is not None:
        existing = next((r for r in reports if r.id == editing_id), None)
        if existing is None:
            raise ReportNotFoundError(editing_id)

    now = now or utc_now()
    raw_text = generate_report_text(form, settings.report_template)
    hours = form.category_hours

    report = Report(
        id=existing.id if existing else str(uuid.uuid4()),
        created_at=existing.created_at if existing else now.isoformat(),
        submitted_at=existing.submitted_at if existing else submitted_stamp(now),
        staff_name=form.staff_name,
        date=form.date,
        work_type=form.work_type,
        work_hours=display_work_hours(form),
        category_hours=CategoryHours(**hours),
        category_texts=CategoryTexts(
            **{key: entry.text for key, entry in form.categories.items()}
        ),
        work_content=build_work_content(
            {key: entry.model_dump() for key, entry in form.categories.items()}
        ),
        learnings=form.learnings,
        issues=form.issues,
        tomorrow_schedule=form.tomorrow_schedule,
        raw_text=raw_text,
    )

    if existing:
        reports = [report if r.id == existing.id else r for r in reports]
        logger.info(f"Updated report {report.id} for {report.staff_name} ({report.date})")
    else:
        reports.insert(0, report)
        logger.info(
            f"Saved report {report.id} for {report.staff_name} ({report.date}, "
            f"{format_hours(sum_category_hours(hours))}h)"
        )

    repository.save_reports(reports)
    return report
