from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.services.dashboard_service import get_dashboard_data
from app.services.reports import local_today
from app.services.staff import load_staff
from app.services.storage import Repository, get_repository
from app.template_config import templates

router = APIRouter(tags=["dashboard"])


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request, repository: Repository = Depends(get_repository)):
    """Dashboard: per-staff status for today, recent reports, this month's hours."""
    today = local_today()
    data = get_dashboard_data(repository.get_reports(), load_staff(repository), today)

    return templates.TemplateResponse(
        request,
        "dashboard/index.html",
        {"today": today, **data},
    )
