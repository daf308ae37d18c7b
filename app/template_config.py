"""Centralized Jinja2 template configuration with timezone support."""
import os
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi.templating import Jinja2Templates

from app.services.hours import format_hours

# App timezone setting - defaults to Japan Standard Time
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Tokyo")

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


def get_app_tz() -> ZoneInfo:
    """Get the application timezone."""
    return ZoneInfo(APP_TIMEZONE)


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime. Use this instead of datetime.now()."""
    return datetime.now(timezone.utc)


def to_local(dt: datetime) -> datetime:
    """Convert to APP_TIMEZONE. Naive values (older stored timestamps) are read as UTC."""
    if dt is None:
        return None

    app_tz = get_app_tz()

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(app_tz)


def _parse(value):
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return value


def submitted_stamp(dt: datetime) -> str:
    """Local submission timestamp, e.g. "2024/1/15 9:05:03"."""
    local_dt = to_local(dt)
    return (
        f"{local_dt.year}/{local_dt.month}/{local_dt.day} "
        f"{local_dt.hour}:{local_dt:%M}:{local_dt:%S}"
    )


def localtime(dt, fmt: str = None) -> str:
    """Jinja filter to convert a UTC datetime (or ISO string) to local time.

    Usage in templates:
        {{ staff.joined_at | localtime }}
        {{ staff.joined_at | localtime('%m/%d %H:%M') }}
    """
    dt = _parse(dt)
    if dt is None:
        return ""

    local_dt = to_local(dt)

    if fmt:
        return local_dt.strftime(fmt)

    return local_dt.strftime("%Y/%m/%d %H:%M")


def localdate(dt, fmt: str = None) -> str:
    """Jinja filter to convert a UTC datetime (or ISO string) to a local date.

    Usage in templates:
        {{ staff.joined_at | localdate }}
    """
    dt = _parse(dt)
    if dt is None:
        return "不明"

    local_dt = to_local(dt)

    if fmt:
        return local_dt.strftime(fmt)

    return f"{local_dt.year}/{local_dt.month}/{local_dt.day}"


def create_templates() -> Jinja2Templates:
    """Create a Jinja2Templates instance with custom filters."""
    templates = Jinja2Templates(directory=TEMPLATE_DIR)

    templates.env.filters["localtime"] = localtime
    templates.env.filters["localdate"] = localdate
    templates.env.filters["hours"] = format_hours

    return templates


# Singleton template instance - import this in route files
templates = create_templates()
