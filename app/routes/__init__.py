from app.routes.dashboard import router as dashboard_router
from app.routes.reports import router as reports_router
from app.routes.staff import router as staff_router
from app.routes.export import router as export_router
from app.routes.settings import router as settings_router

__all__ = [
    'dashboard_router',
    'reports_router',
    'staff_router',
    'export_router',
    'settings_router',
]
