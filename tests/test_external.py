"""
Tests for the AI analysis and webhook adapters.

Neither test touches the network: the Anthropic client and the
requests session are replaced with fakes.
"""

from types import SimpleNamespace

import requests

from app.schemas import Report, Settings
from app.services.analysis import FALLBACK_ANALYSIS, ReportAnalyzer
from app.services.notifier import WebhookNotifier, build_payload, get_notifier


class FakeMessages:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.reply)])


def fake_client(reply=None, error=None):
    return SimpleNamespace(messages=FakeMessages(reply=reply, error=error))


class FakeSession:
    def __init__(self, error=None):
        self.error = error
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error:
            raise self.error
        return SimpleNamespace(status_code=200)


REPORT = Report(
    id="r1",
    created_at="2024-01-15T00:05:03+00:00",
    submitted_at="2024/1/15 9:05:03",
    staff_name="Alice",
    date="2024-01-15",
    work_hours="8時間（9:00〜18:00、休憩1時間）",
    raw_text="【日付】2024年1月15日（月）",
)


class TestReportAnalyzer:
    """Tests for ReportAnalyzer."""

    def test_parses_json_reply(self):
        client = fake_client(
            '```json\n{"summary": "順調な一日", "suggestions": ["早めに共有する"], '
            '"sentiment": "positive"}\n```'
        )
        analysis = ReportAnalyzer(client=client, model="test-model").analyze("日報")

        assert analysis.summary == "順調な一日"
        assert analysis.suggestions == ["早めに共有する"]
        assert analysis.sentiment == "positive"
        assert client.messages.calls[0]["model"] == "test-model"
        assert "日報" in client.messages.calls[0]["messages"][0]["content"]

    def test_api_error_falls_back(self):
        client = fake_client(error=RuntimeError("overloaded"))
        analysis = ReportAnalyzer(client=client).analyze("日報")
        assert analysis == FALLBACK_ANALYSIS

    def test_non_json_reply_falls_back(self):
        analysis = ReportAnalyzer(client=fake_client("すみません")).analyze("日報")
        assert analysis.summary == "分析できませんでした。"
        assert analysis.sentiment == "neutral"

    def test_unknown_sentiment_falls_back(self):
        client = fake_client('{"summary": "x", "suggestions": [], "sentiment": "angry"}')
        assert ReportAnalyzer(client=client).analyze("日報") == FALLBACK_ANALYSIS

    def test_missing_api_key_falls_back(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert ReportAnalyzer().analyze("日報") == FALLBACK_ANALYSIS

    def test_fallback_is_a_copy(self):
        """Callers mutating the result cannot corrupt the shared fallback."""
        analysis = ReportAnalyzer(client=fake_client(error=RuntimeError())).analyze("x")
        analysis.suggestions.append("extra")
        assert FALLBACK_ANALYSIS.suggestions == ["継続して業務に取り組んでください。"]


class TestWebhookNotifier:
    """Tests for WebhookNotifier."""

    def test_posts_payload(self):
        session = FakeSession()
        settings = Settings(webhook_url="https://hooks.example.com/nippo", email_recipient="boss@example.com")

        assert WebhookNotifier(session=session, timeout=5).notify(REPORT, settings) is True

        post = session.posts[0]
        assert post["url"] == "https://hooks.example.com/nippo"
        assert post["timeout"] == 5
        assert post["json"]["type"] == "daily_report"
        assert post["json"]["email"] == "boss@example.com"
        assert post["json"]["report"]["id"] == "r1"

    def test_skipped_without_url(self):
        session = FakeSession()
        assert WebhookNotifier(session=session).notify(REPORT, Settings()) is False
        assert session.posts == []

    def test_network_error_swallowed(self):
        session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
        settings = Settings(webhook_url="https://hooks.example.com/nippo")
        assert WebhookNotifier(session=session).notify(REPORT, settings) is False

    def test_notifiers_share_one_session(self):
        """Each request gets a notifier, but they reuse one pooled session."""
        assert get_notifier().session is get_notifier().session

    def test_staff_field_prefers_settings_name(self):
        payload = build_payload(REPORT, Settings(staff_name="Team A"))
        assert payload["staff"] == "Team A"

    def test_staff_field_falls_back_to_report(self):
        payload = build_payload(REPORT, Settings())
        assert payload["staff"] == "Alice"
        assert payload["timestamp"]
