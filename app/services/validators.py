"""
Data Quality Validators

Centralized validation for report submissions and staff records.
Blocking problems raise ValidationError or DuplicateNameError with
human-readable (Japanese) messages that routes show inline.
"""

import re
from datetime import datetime
from typing import Any, Iterable, Optional

from app.constants import STAFF_COLORS
from app.services.hours import format_hours, hours_match

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ValidationError(ValueError):
    """A submission is incomplete or inconsistent and must be corrected."""

    def __init__(self, message: str, code: str, current: float = None, target: float = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.current = current
        self.target = target


class DuplicateNameError(ValueError):
    """A staff name collides with another registered staff member."""

    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name
        self.message = message


class ExternalServiceError(RuntimeError):
    """An outbound call (analysis, webhook) failed. Never leaves the adapter."""


class ReportNotFoundError(LookupError):
    pass


class StaffNotFoundError(LookupError):
    pass


def _is_empty(value: Any) -> bool:
    """Check if value is None or empty string."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


# ============================================================
# REPORT VALIDATION
# ============================================================

def validate_staff_selected(staff_name: Optional[str]) -> None:
    """A report must name the submitting staff member."""
    if _is_empty(staff_name):
        raise ValidationError("スタッフを選択してください。", code="missing_staff")


def validate_report_date(value: Optional[str]) -> None:
    """
    The target date must be a zero-padded YYYY-MM-DD calendar date.

    Stored dates are compared as strings, so "2024-1-5" is rejected even
    though strptime would accept it.
    """
    try:
        if not _ISO_DATE_RE.match(value or ""):
            raise ValueError(value)
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValidationError("対象日付を正しく入力してください。", code="invalid_date")


def validate_hours_reconcile(current: float, target: float) -> None:
    """
    Block submission when category hours do not add up to the day's total.

    Raises:
        ValidationError: code "hours_mismatch", carrying both values
    """
    if not hours_match(current, target):
        raise ValidationError(
            f"稼働時間の不整合: カテゴリ合計 ({format_hours(current)}h) が"
            f"今日の総稼働時間 ({format_hours(target)}h) と一致しません。"
            "内容を確認して再入力してください。",
            code="hours_mismatch",
            current=current,
            target=target,
        )


# ============================================================
# STAFF VALIDATION
# ============================================================

def validate_staff_name(
    name: Optional[str],
    staffs: Iterable,
    existing_id: Optional[str] = None,
) -> str:
    """
    Validate a staff name for add (existing_id=None) or rename.

    Names are compared exactly (case-sensitive) against every other staff
    member; a staff member keeping their own name is not a collision.

    Returns:
        The trimmed name
    """
    if _is_empty(name):
        raise ValidationError("スタッフ名を入力してください。", code="missing_name")
    name = name.strip()

    for staff in staffs:
        if staff.name == name and staff.id != existing_id:
            if existing_id is None:
                message = "その名前は既に登録されています。"
            else:
                message = "その名前は既に他のスタッフで使用されています。"
            raise DuplicateNameError(name, message)

    return name


def validate_staff_color(color: str) -> str:
    if color not in STAFF_COLORS:
        raise ValidationError(f"Unknown staff color '{color}'", code="invalid_color")
    return color
