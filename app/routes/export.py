from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from app.services.listing import (
    default_export_range,
    export_filename,
    filter_by_date_range,
    reports_to_csv,
)
from app.services.reports import local_today
from app.services.storage import Repository, get_repository
from app.services.validators import ValidationError, validate_report_date
from app.template_config import templates

router = APIRouter(prefix="/export", tags=["export"])

INVALID_RANGE_MESSAGE = "期間は YYYY-MM-DD 形式で指定してください。"


def _resolve_range(start: str, end: str):
    """
    Fill missing bounds with this month so far.

    Raises:
        ValidationError: a bound is not a YYYY-MM-DD date
    """
    default_start, default_end = default_export_range(local_today())
    start, end = start or default_start, end or default_end
    validate_report_date(start)
    validate_report_date(end)
    return start, end


def _render_export(request, reports, start, end, error=None, status_code=200):
    return templates.TemplateResponse(
        request,
        "export/index.html",
        {"reports": reports, "start": start, "end": end, "error": error},
        status_code=status_code,
    )


@router.get("", response_class=HTMLResponse)
async def export_preview(
    request: Request,
    start: str = None,
    end: str = None,
    repository: Repository = Depends(get_repository),
):
    """Preview the reports a CSV download would contain (defaults to this month)."""
    try:
        start, end = _resolve_range(start, end)
    except ValidationError:
        return _render_export(request, [], start, end, error=INVALID_RANGE_MESSAGE, status_code=400)

    return _render_export(
        request, filter_by_date_range(repository.get_reports(), start, end), start, end
    )


@router.get("/download")
async def export_download(
    request: Request,
    start: str = None,
    end: str = None,
    repository: Repository = Depends(get_repository),
):
    """CSV download of reports dated start..end, oldest first."""
    try:
        start, end = _resolve_range(start, end)
    except ValidationError:
        return _render_export(request, [], start, end, error=INVALID_RANGE_MESSAGE, status_code=400)

    reports = filter_by_date_range(repository.get_reports(), start, end)
    if not reports:
        return _render_export(
            request, [], start, end, error="対象期間のデータがありません。", status_code=404
        )

    return Response(
        content=reports_to_csv(reports).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(start, end)}"'
        },
    )
