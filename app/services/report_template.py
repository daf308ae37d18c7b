"""
Report text rendering.

The report template is user-editable text with {{placeholder}} tokens.
Recognized tokens are replaced everywhere they occur; anything else in
double braces is left as written.
"""

import re
from datetime import date, datetime
from typing import Mapping, Union

from app.constants import CATEGORY_KEYS, CATEGORY_LABELS, EMPTY_SECTION_TEXT
from app.services.hours import format_hours

# Monday-first to match date.weekday()
WEEKDAY_NAMES = ["月", "火", "水", "木", "金", "土", "日"]

PLACEHOLDERS = {
    "date": "{{date}}",
    "work_hours": "{{workHours}}",
    "work_content": "{{workContent}}",
    "learnings": "{{learnings}}",
    "issues": "{{issues}}",
    "tomorrow_schedule": "{{tomorrowSchedule}}",
}

# Placeholder labels shown next to the template editor
PLACEHOLDER_LABELS = {
    "{{date}}": "対象日付",
    "{{workHours}}": "稼働時間",
    "{{workContent}}": "業務内容",
    "{{learnings}}": "学んだこと",
    "{{issues}}": "課題/質問",
    "{{tomorrowSchedule}}": "明日の予定",
}

# Always populated, so never replaced by EMPTY_SECTION_TEXT
_REQUIRED_FIELDS = {"date", "work_hours"}

_TOKEN_RE = re.compile("|".join(re.escape(token) for token in PLACEHOLDERS.values()))


def format_report_date(value: Union[str, date]) -> str:
    """Format a date as 2024年1月15日（月）."""
    if isinstance(value, str):
        value = datetime.strptime(value, "%Y-%m-%d").date()
    weekday = WEEKDAY_NAMES[value.weekday()]
    return f"{value.year}年{value.month}月{value.day}日（{weekday}）"


def build_work_content(categories: Mapping[str, Mapping]) -> str:
    """
    Assemble the per-category work section.

    Args:
        categories: {"sns": {"text": ..., "hours": ...}, ...}

    Returns:
        One block per category with text, in fixed category order:
        "■SNS運用 [2h]\\n<text>" (the hour tag only when hours > 0),
        blocks separated by a blank line
    """
    parts = []
    for key in CATEGORY_KEYS:
        entry = categories.get(key) or {}
        text = (entry.get("text") or "").strip()
        if not text:
            continue
        hours = entry.get("hours") or 0
        try:
            hours = float(hours)
        except (TypeError, ValueError):
            hours = 0
        time_tag = f" [{format_hours(hours)}h]" if hours > 0 else ""
        parts.append(f"■{CATEGORY_LABELS[key]}{time_tag}\n{text}")
    return "\n\n".join(parts)


def flex_hours_text(total: str, start: str, end: str, core: str, break_hours: str) -> str:
    """Describe a flex day for the {{workHours}} slot."""
    return (
        f"{total}時間（フレックス制：{start}〜{end}、"
        f"コアタイム：{core}、休憩{break_hours}時間）"
    )


def render_report(template: str, fields: Mapping[str, str]) -> str:
    """
    Fill the template's placeholders from fields.

    Args:
        template: Template text
        fields: Values keyed like PLACEHOLDERS (date already formatted)

    Returns:
        The rendered text. Empty optional sections read EMPTY_SECTION_TEXT.
        Tokens inside inserted values are kept as typed.
    """
    values = {}
    for field, token in PLACEHOLDERS.items():
        value = fields.get(field) or ""
        if field not in _REQUIRED_FIELDS and not value.strip():
            value = EMPTY_SECTION_TEXT
        values[token] = value

    return _TOKEN_RE.sub(lambda match: values[match.group(0)], template)
