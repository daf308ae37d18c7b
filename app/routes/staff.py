from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.constants import STAFF_COLORS
from app.services.staff import add_staff, load_staff, update_staff
from app.services.storage import Repository, get_repository
from app.services.validators import DuplicateNameError, StaffNotFoundError, ValidationError
from app.template_config import templates

router = APIRouter(prefix="/staff", tags=["staff"])


def _render_staff_page(request, repository, error=None, editing_id=None, status_code=200):
    return templates.TemplateResponse(
        request,
        "staff/index.html",
        {
            "staffs": load_staff(repository),
            "colors": STAFF_COLORS,
            "error": error,
            "editing_id": editing_id,
        },
        status_code=status_code,
    )


@router.get("", response_class=HTMLResponse)
async def list_staff(
    request: Request,
    edit: str = None,
    repository: Repository = Depends(get_repository),
):
    """Staff list with add form; ?edit=<id> opens the inline edit form."""
    return _render_staff_page(request, repository, editing_id=edit)


@router.post("")
async def create_staff(
    request: Request,
    name: str = Form(""),
    repository: Repository = Depends(get_repository),
):
    try:
        add_staff(repository, name)
    except (DuplicateNameError, ValidationError) as e:
        return _render_staff_page(request, repository, error=e.message, status_code=400)
    return RedirectResponse(url="/staff", status_code=303)


@router.post("/{staff_id}/edit")
async def edit_staff(
    request: Request,
    staff_id: str,
    name: str = Form(""),
    color: str = Form(None),
    repository: Repository = Depends(get_repository),
):
    """Rename/recolor. Previously saved reports keep the old name."""
    try:
        update_staff(repository, staff_id, name, color=color)
    except StaffNotFoundError:
        raise HTTPException(status_code=404, detail="Staff not found")
    except (DuplicateNameError, ValidationError) as e:
        return _render_staff_page(
            request, repository, error=e.message, editing_id=staff_id, status_code=400
        )
    return RedirectResponse(url="/staff", status_code=303)
