"""
Unit tests for report text rendering.

Tests:
- Japanese date formatting with weekday
- Category work-content assembly
- Placeholder substitution and empty-section fallback
"""

from datetime import date

from app.constants import DEFAULT_TEMPLATE
from app.services.report_template import (
    build_work_content,
    flex_hours_text,
    format_report_date,
    render_report,
)


FIELDS = {
    "date": "2024年1月15日（月）",
    "work_hours": "8時間（9:00〜18:00、休憩1時間）",
    "work_content": "■SNS運用 [8h]\n投稿作成",
    "learnings": "",
    "issues": "",
    "tomorrow_schedule": "",
}


class TestFormatReportDate:
    """Tests for format_report_date function."""

    def test_monday(self):
        assert format_report_date("2024-01-15") == "2024年1月15日（月）"

    def test_sunday(self):
        """Sunday maps to 日."""
        assert format_report_date("2024-01-14") == "2024年1月14日（日）"

    def test_saturday_date_object(self):
        """date objects are accepted too."""
        assert format_report_date(date(2024, 12, 28)) == "2024年12月28日（土）"


class TestBuildWorkContent:
    """Tests for build_work_content function."""

    def test_hours_tag_and_blank_line_between(self):
        """Each category gets a header with hours, separated by a blank line."""
        result = build_work_content({
            "sns": {"text": "投稿作成", "hours": 3},
            "wix": {"text": "  LP修正  ", "hours": 2.5},
        })
        assert result == "■SNS運用 [3h]\n投稿作成\n\n■Wix実装 [2.5h]\nLP修正"

    def test_no_hours_tag_when_zero(self):
        """Zero hours leaves the header bare."""
        result = build_work_content({"other": {"text": "朝会", "hours": 0}})
        assert result == "■その他\n朝会"

    def test_blank_text_categories_skipped(self):
        """Categories without text are dropped even when they have hours."""
        result = build_work_content({
            "sns": {"text": "   ", "hours": 4},
            "design": {"text": "バナー", "hours": 4},
        })
        assert result == "■デザイン [4h]\nバナー"

    def test_fixed_category_order(self):
        """Output follows sns, wix, design, other regardless of input order."""
        result = build_work_content({
            "other": {"text": "B", "hours": 1},
            "sns": {"text": "A", "hours": 1},
        })
        assert result.index("SNS運用") < result.index("その他")

    def test_nothing_entered(self):
        assert build_work_content({}) == ""


class TestRenderReport:
    """Tests for render_report function."""

    def test_default_template(self):
        """All six placeholders are filled in the default template."""
        result = render_report(DEFAULT_TEMPLATE, FIELDS)
        assert "【日付】2024年1月15日（月）" in result
        assert "【稼働時間】8時間（9:00〜18:00、休憩1時間）" in result
        assert "■SNS運用 [8h]\n投稿作成" in result
        assert "{{" not in result

    def test_empty_sections_use_fallback(self):
        """Empty learnings/issues/tomorrow read 特になし."""
        result = render_report("{{learnings}}|{{issues}}|{{tomorrowSchedule}}", FIELDS)
        assert result == "特になし|特になし|特になし"

    def test_empty_work_content_uses_fallback(self):
        result = render_report("{{workContent}}", {**FIELDS, "work_content": ""})
        assert result == "特になし"

    def test_template_without_placeholders_unchanged(self):
        """Text with no recognized tokens renders as-is."""
        template = "本日もお疲れさまでした。\n以上"
        assert render_report(template, FIELDS) == template

    def test_unknown_placeholder_left_verbatim(self):
        result = render_report("{{date}} {{mood}}", FIELDS)
        assert result == "2024年1月15日（月） {{mood}}"

    def test_repeated_placeholder_filled_everywhere(self):
        """Every occurrence of a token is replaced, not only the first."""
        result = render_report("{{date}} / {{date}}", FIELDS)
        assert result == "2024年1月15日（月） / 2024年1月15日（月）"


class TestFlexHoursText:
    """Tests for flex_hours_text function."""

    def test_flex_description(self):
        result = flex_hours_text("8.0", "10:00", "19:00", "11:00〜15:00", "1.0")
        assert result == "8.0時間（フレックス制：10:00〜19:00、コアタイム：11:00〜15:00、休憩1.0時間）"


class TestRenderReportValues:
    """Entered text is inserted as-is."""

    def test_token_typed_in_a_field_is_not_expanded(self):
        """A learnings entry mentioning {{issues}} keeps the literal token."""
        fields = {**FIELDS, "learnings": "{{issues}} の書き方を学んだ", "issues": "素材待ち"}
        result = render_report("{{learnings}}|{{issues}}", fields)
        assert result == "{{issues}} の書き方を学んだ|素材待ち"
