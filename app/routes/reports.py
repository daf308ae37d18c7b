import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse

from app.constants import CATEGORY_LABELS, SHIFT_OPTIONS, WORK_TYPE_LABELS
from app.services.analysis import ReportAnalyzer, get_analyzer
from app.services.hours import format_hours, hours_match, target_hours
from app.services.listing import ALL_STAFF, filter_reports, staff_names
from app.services.notifier import WebhookNotifier, get_notifier
from app.services.reports import (
    ReportForm,
    form_from_report,
    new_report_form,
    refresh_flex_total,
    submit_report,
)
from app.services.staff import load_staff
from app.services.storage import Repository, get_repository
from app.services.validators import ReportNotFoundError, ValidationError
from app.template_config import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def _get_report_or_404(repository: Repository, report_id: str):
    report = repository.get_report(report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return report


def _render_form(request, repository, form, error=None, report=None, status_code=200):
    return templates.TemplateResponse(
        request,
        "reports/form.html",
        {
            "form": form,
            "report": report,
            "staffs": load_staff(repository),
            "shift_options": SHIFT_OPTIONS,
            "category_labels": CATEGORY_LABELS,
            "error": error,
        },
        status_code=status_code,
    )


@router.get("", response_class=HTMLResponse)
async def list_reports(
    request: Request,
    search: str = "",
    staff: str = ALL_STAFF,
    repository: Repository = Depends(get_repository),
):
    """History, newest first, with free-text search and staff filter."""
    reports = repository.get_reports()
    return templates.TemplateResponse(
        request,
        "reports/list.html",
        {
            "reports": filter_reports(reports, search=search, staff=staff),
            "staff_list": staff_names(reports),
            "search": search,
            "staff_filter": staff,
            "work_type_labels": WORK_TYPE_LABELS,
        },
    )


@router.get("/new", response_class=HTMLResponse)
async def new_report(
    request: Request,
    staff: str = None,
    repository: Repository = Depends(get_repository),
):
    """Display the new report form, optionally preselecting a staff member."""
    form = new_report_form(repository.get_settings(), load_staff(repository), preselected_staff=staff)
    return _render_form(request, repository, form)


@router.post("")
async def create_report(
    request: Request,
    background_tasks: BackgroundTasks,
    repository: Repository = Depends(get_repository),
    notifier: WebhookNotifier = Depends(get_notifier),
):
    """Submit a new report."""
    form = ReportForm.from_form_data(await request.form())
    settings = repository.get_settings()

    try:
        report = submit_report(repository, form, settings)
    except ValidationError as e:
        return _render_form(request, repository, form, error=e.message, status_code=400)

    background_tasks.add_task(notifier.notify, report, settings)
    return RedirectResponse(url="/reports", status_code=303)


@router.get("/hours-check", response_class=JSONResponse)
async def hours_check(request: Request):
    """Live reconciliation preview for the report form."""
    form = ReportForm.from_form_data(request.query_params)
    try:
        refresh_flex_total(form)
    except ValidationError as e:
        return JSONResponse({"error": e.message}, status_code=400)

    target = target_hours(form.work_type, form.work_hours, form.flex.total)
    current = form.current_total
    return {
        "flex_total": form.flex.total,
        "target": target,
        "current": current,
        "target_display": format_hours(target),
        "current_display": format_hours(current),
        "matches": hours_match(current, target),
    }


@router.get("/{report_id}", response_class=HTMLResponse)
async def report_detail(
    request: Request,
    report_id: str,
    repository: Repository = Depends(get_repository),
):
    report = _get_report_or_404(repository, report_id)
    return templates.TemplateResponse(
        request,
        "reports/detail.html",
        {"report": report, "analysis": None, "work_type_labels": WORK_TYPE_LABELS},
    )


@router.post("/{report_id}/analyze", response_class=HTMLResponse)
async def analyze_report(
    request: Request,
    report_id: str,
    repository: Repository = Depends(get_repository),
    analyzer: ReportAnalyzer = Depends(get_analyzer),
):
    """Run AI analysis on the report text and show it beside the report."""
    report = _get_report_or_404(repository, report_id)
    analysis = analyzer.analyze(report.raw_text)
    return templates.TemplateResponse(
        request,
        "reports/detail.html",
        {"report": report, "analysis": analysis, "work_type_labels": WORK_TYPE_LABELS},
    )


@router.get("/{report_id}/raw", response_class=PlainTextResponse)
async def report_raw_text(report_id: str, repository: Repository = Depends(get_repository)):
    """Plain rendered text, for copy/paste into chat or email."""
    return _get_report_or_404(repository, report_id).raw_text


@router.get("/{report_id}/edit", response_class=HTMLResponse)
async def edit_report_form(
    request: Request,
    report_id: str,
    repository: Repository = Depends(get_repository),
):
    report = _get_report_or_404(repository, report_id)
    form = form_from_report(report, repository.get_settings())
    return _render_form(request, repository, form, report=report)


@router.post("/{report_id}/edit")
async def update_report(
    request: Request,
    report_id: str,
    background_tasks: BackgroundTasks,
    repository: Repository = Depends(get_repository),
    notifier: WebhookNotifier = Depends(get_notifier),
):
    """Save changes to an existing report, keeping its id and timestamps."""
    report = _get_report_or_404(repository, report_id)
    form = ReportForm.from_form_data(await request.form())
    settings = repository.get_settings()

    try:
        updated = submit_report(repository, form, settings, editing_id=report_id)
    except ValidationError as e:
        return _render_form(
            request, repository, form, error=e.message, report=report, status_code=400
        )
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail="Report not found")

    background_tasks.add_task(notifier.notify, updated, settings)
    return RedirectResponse(url=f"/reports/{report_id}", status_code=303)
