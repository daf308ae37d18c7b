import logging

from fastapi import FastAPI, Request
from dotenv import load_dotenv

load_dotenv()

from app.routes import (
    dashboard_router,
    reports_router,
    staff_router,
    export_router,
    settings_router,
)
from app.database import init_db, DATABASE_URL
from app.template_config import templates

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Smart Nippo",
    description="Daily work report logging",
    version="1.0.0"
)

# Include routers
app.include_router(dashboard_router)
app.include_router(reports_router)
app.include_router(staff_router)
app.include_router(export_router)
app.include_router(settings_router)


@app.on_event("startup")
def on_startup():
    """Create the key/value table on first run. Fails loudly if the database
    cannot be reached.
    """
    try:
        init_db()
    except Exception as e:
        raise RuntimeError(
            f"Database initialization failed for DATABASE_URL={DATABASE_URL}: {e}"
        ) from e
    logger.info("Database ready")


# Error handlers
@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    """Handle 404 errors."""
    return templates.TemplateResponse(
        request,
        "errors/404.html",
        {"detail": getattr(exc, "detail", None)},
        status_code=404
    )


@app.exception_handler(500)
async def server_error_handler(request: Request, exc):
    """Handle 500 errors."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return templates.TemplateResponse(
        request,
        "errors/500.html",
        {},
        status_code=500
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
