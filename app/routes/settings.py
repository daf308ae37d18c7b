from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.constants import DEFAULT_TEMPLATE
from app.schemas import Settings
from app.services.report_template import PLACEHOLDER_LABELS
from app.services.storage import Repository, get_repository
from app.template_config import templates

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_class=HTMLResponse)
async def settings_page(
    request: Request,
    saved: bool = False,
    repository: Repository = Depends(get_repository),
):
    return templates.TemplateResponse(
        request,
        "settings/index.html",
        {
            "settings": repository.get_settings(),
            "placeholders": PLACEHOLDER_LABELS,
            "saved": saved,
        },
    )


@router.post("")
async def save_settings(
    default_work_hours: str = Form(""),
    email_recipient: str = Form(""),
    webhook_url: str = Form(""),
    staff_name: str = Form(""),
    report_template: str = Form(""),
    repository: Repository = Depends(get_repository),
):
    """Save settings. Blank template or default hours fall back to the built-in defaults."""
    settings = Settings(
        default_work_hours=default_work_hours.strip(),
        email_recipient=email_recipient.strip(),
        webhook_url=webhook_url.strip(),
        staff_name=staff_name.strip(),
        report_template=report_template,
    )
    repository.save_settings(settings)
    return RedirectResponse(url="/settings?saved=true", status_code=303)


@router.post("/reset-template")
async def reset_template(repository: Repository = Depends(get_repository)):
    """Restore the built-in report template, keeping the other settings."""
    settings = repository.get_settings()
    settings.report_template = DEFAULT_TEMPLATE
    repository.save_settings(settings)
    return RedirectResponse(url="/settings?saved=true", status_code=303)
