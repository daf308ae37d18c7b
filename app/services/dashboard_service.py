from datetime import date
from typing import List

from app.constants import CATEGORY_KEYS, CATEGORY_LABELS
from app.schemas import Report, Staff


def get_dashboard_data(reports: List[Report], staffs: List[Staff], today: date) -> dict:
    today_str = today.isoformat()
    month_prefix = today_str[:7]

    staff_cards = []
    for staff in staffs:
        own = [r for r in reports if r.staff_name == staff.name]
        staff_cards.append({
            "staff": staff,
            "report_count": len(own),
            "last_date": max((r.date for r in own), default=None),
            "submitted_today": any(r.date == today_str for r in own),
        })

    month_reports = [r for r in reports if r.date.startswith(month_prefix)]
    category_totals = {
        CATEGORY_LABELS[key]: sum(getattr(r.category_hours, key) for r in month_reports)
        for key in CATEGORY_KEYS
    }

    return {
        "staff_cards": staff_cards,
        "recent_reports": reports[:5],
        "total_reports": len(reports),
        "month_report_count": len(month_reports),
        "month_category_totals": category_totals,
        "month_total_hours": sum(category_totals.values()),
        "today_count": sum(1 for r in reports if r.date == today_str),
    }
