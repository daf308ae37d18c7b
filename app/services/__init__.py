from app.services.hours import (
    calculate_flex_total,
    parse_shift_hours,
    sum_category_hours,
    hours_match,
)
from app.services.report_template import (
    render_report,
    format_report_date,
    build_work_content,
)
from app.services.listing import (
    filter_reports,
    filter_by_date_range,
    reports_to_csv,
)

__all__ = [
    'calculate_flex_total',
    'parse_shift_hours',
    'sum_category_hours',
    'hours_match',
    'render_report',
    'format_report_date',
    'build_work_content',
    'filter_reports',
    'filter_by_date_range',
    'reports_to_csv',
]
