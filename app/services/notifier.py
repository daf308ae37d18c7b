"""
Webhook notification for saved reports.

Posts the report as JSON to the configured URL (typically a Google Apps
Script, Make or Zapier endpoint). Notify and ignore the outcome: the
response body is never read, failures are logged, and nothing is retried
or rolled back.
"""
import logging
import os

import requests

from app.schemas import Report, Settings
from app.template_config import utc_now

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT = float(os.getenv("WEBHOOK_TIMEOUT", "10"))

# Shared across requests
_session = requests.Session()


def build_payload(report: Report, settings: Settings) -> dict:
    return {
        "type": "daily_report",
        "timestamp": utc_now().isoformat(),
        "staff": settings.staff_name or report.staff_name,
        "email": settings.email_recipient,
        "report": report.model_dump(mode="json"),
    }


class WebhookNotifier:
    """Fire-and-forget POST of saved reports."""

    def __init__(self, session: requests.Session = None, timeout: float = None):
        self.session = session or _session
        self.timeout = timeout or WEBHOOK_TIMEOUT

    def notify(self, report: Report, settings: Settings) -> bool:
        """
        Send a report to the configured webhook.

        Returns:
            True if the request was sent, False if skipped or failed
        """
        if not settings.webhook_url:
            logger.warning("Webhook URL not configured. Skipping external integration.")
            return False

        try:
            self.session.post(
                settings.webhook_url,
                json=build_payload(report, settings),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Webhook trigger failed for report {report.id}: {e}")
            return False

        logger.info(f"Webhook sent for report {report.id}")
        return True


def get_notifier() -> WebhookNotifier:
    """Dependency for FastAPI routes."""
    return WebhookNotifier()
