"""Shared constants for reports, staff and settings."""

# Keys of the three JSON collections in the key/value store
STORAGE_KEYS = {
    "reports": "smart_nippo_reports",
    "settings": "smart_nippo_settings",
    "staffs": "smart_nippo_staffs",
}

# Fixed work categories, in display order
CATEGORY_LABELS = {
    "sns": "SNS運用",
    "wix": "Wix実装",
    "design": "デザイン",
    "other": "その他",
}
CATEGORY_KEYS = list(CATEGORY_LABELS)

WORK_TYPES = ["standard", "flex"]
WORK_TYPE_LABELS = {
    "standard": "通常勤務",
    "flex": "フレックス",
}

DEFAULT_WORK_HOURS = "8時間（9:00〜18:00、休憩1時間）"

# Preset shift strings offered on the report form
SHIFT_OPTIONS = [
    "8時間（9:00〜18:00、休憩1時間）",
    "8時間（10:00〜19:00、休憩1時間）",
    "7時間（10:00〜18:00、休憩1時間）",
]

STAFF_COLORS = [
    "bg-indigo-500", "bg-emerald-500", "bg-rose-500", "bg-amber-500",
    "bg-sky-500", "bg-violet-500", "bg-fuchsia-500", "bg-pink-500",
    "bg-teal-500", "bg-orange-500", "bg-cyan-500", "bg-lime-500",
]

# Rendered in place of empty report sections
EMPTY_SECTION_TEXT = "特になし"

DEFAULT_TEMPLATE = """━━━━━━━━━━━━━━━━━━━━━━
業務日報
━━━━━━━━━━━━━━━━━━━━━━

【日付】{{date}}

【稼働時間】{{workHours}}

━━━━━━━━━━━━━━━━━━━━━━
【本日の業務内容】
━━━━━━━━━━━━━━━━━━━━━━

{{workContent}}

━━━━━━━━━━━━━━━━━━━━━━
【学んだこと・気づいたこと】
━━━━━━━━━━━━━━━━━━━━━━

{{learnings}}

━━━━━━━━━━━━━━━━━━━━━━
【困っていること・質問】
━━━━━━━━━━━━━━━━━━━━━━

{{issues}}

━━━━━━━━━━━━━━━━━━━━━━
【明日の予定】
━━━━━━━━━━━━━━━━━━━━━━

{{tomorrowSchedule}}

━━━━━━━━━━━━━━━━━━━━━━"""
