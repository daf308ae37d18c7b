"""
History filtering and CSV export.

History keeps insertion order (newest first); exports are chronological.
Nothing here mutates the report list.
"""

from datetime import date
from typing import Iterable, List, Optional

from app.constants import CATEGORY_KEYS, WORK_TYPE_LABELS
from app.schemas import Report
from app.services.hours import format_hours

ALL_STAFF = "all"

CSV_HEADERS = [
    "日付", "提出日時", "スタッフ名", "勤務形態", "稼働時間",
    "SNS時間(h)", "Wix時間(h)", "デザイン時間(h)", "その他時間(h)",
    "業務内容", "学んだこと", "困っていること", "明日の予定",
]

# Byte-order mark; Excel reads BOM-less CSV as Shift_JIS
CSV_BOM = "\ufeff"


def matches_search(report: Report, term: Optional[str]) -> bool:
    """
    Free-text match used by the history search box.

    Work content and staff name match case-insensitively; the date matches
    as a literal substring ("2024-01" finds all of January).
    """
    if not term:
        return True
    needle = term.lower()
    return (
        needle in report.work_content.lower()
        or term in report.date
        or needle in report.staff_name.lower()
    )


def filter_reports(
    reports: Iterable[Report],
    search: Optional[str] = None,
    staff: Optional[str] = ALL_STAFF,
) -> List[Report]:
    """Apply the search term and staff filter, keeping the original order."""
    return [
        r for r in reports
        if matches_search(r, search)
        and (not staff or staff == ALL_STAFF or r.staff_name == staff)
    ]


def staff_names(reports: Iterable[Report]) -> List[str]:
    """Distinct staff names appearing in history, for the filter dropdown."""
    return sorted({r.staff_name for r in reports if r.staff_name})


def filter_by_date_range(reports: Iterable[Report], start: str, end: str) -> List[Report]:
    """
    Reports dated start..end inclusive, oldest first.

    Dates are compared as YYYY-MM-DD strings, which sort chronologically.
    """
    selected = [r for r in reports if start <= r.date <= end]
    return sorted(selected, key=lambda r: r.date)


def default_export_range(today: date) -> tuple:
    """First day of the current month through today."""
    return today.replace(day=1).isoformat(), today.isoformat()


def _quote(value) -> str:
    return '"' + str(value).replace('"', '""') + '"'


def report_row(report: Report) -> list:
    hours = report.category_hours.model_dump()
    return [
        report.date,
        report.submitted_at,
        report.staff_name,
        WORK_TYPE_LABELS.get(report.work_type, report.work_type),
        report.work_hours,
        *[format_hours(hours.get(key) or 0) for key in CATEGORY_KEYS],
        report.work_content,
        report.learnings,
        report.issues,
        report.tomorrow_schedule,
    ]


def reports_to_csv(reports: Iterable[Report]) -> str:
    """
    Serialize reports to CSV text.

    Header labels are bare; every data cell is wrapped in double quotes with
    embedded quotes doubled. Rows are joined with \\n and the output starts
    with a byte-order mark.
    """
    lines = [",".join(CSV_HEADERS)]
    for report in reports:
        lines.append(",".join(_quote(cell) for cell in report_row(report)))
    return CSV_BOM + "\n".join(lines)


def export_filename(start: str, end: str) -> str:
    return f"daily_reports_{start}_to_{end}.csv"
