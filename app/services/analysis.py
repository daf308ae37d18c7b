"""
AI feedback for a submitted report.
Uses Anthropic Claude to summarize the report and suggest next steps.

analyze() never raises: any failure (no API key, API error, unusable
response) returns FALLBACK_ANALYSIS.
"""
import json
import logging
import os
from typing import Optional

import anthropic
from pydantic import ValidationError as SchemaError

from app.schemas import AIAnalysis
from app.services.validators import ExternalServiceError

logger = logging.getLogger(__name__)

ANALYSIS_MODEL = os.getenv("ANALYSIS_MODEL", "claude-3-7-sonnet-20250219")
ANALYSIS_TIMEOUT = float(os.getenv("ANALYSIS_TIMEOUT", "60"))

FALLBACK_ANALYSIS = AIAnalysis(
    summary="分析できませんでした。",
    suggestions=["継続して業務に取り組んでください。"],
    sentiment="neutral",
)


class ReportAnalyzer:
    """Sends report text to Claude and parses a structured verdict."""

    def __init__(self, client: Optional[anthropic.Anthropic] = None, model: str = None):
        self.client = client
        self.model = model or ANALYSIS_MODEL

    def _get_client(self) -> anthropic.Anthropic:
        if self.client is None:
            api_key = os.getenv("ANTHROPIC_API_KEY")
            if not api_key:
                raise ExternalServiceError("ANTHROPIC_API_KEY environment variable not set")
            self.client = anthropic.Anthropic(api_key=api_key, timeout=ANALYSIS_TIMEOUT)
        return self.client

    def analyze(self, report_text: str) -> AIAnalysis:
        """
        Analyze a daily report.

        Args:
            report_text: The rendered report text

        Returns:
            AIAnalysis with:
                - summary: one-sentence summary
                - suggestions: actionable advice
                - sentiment: positive, neutral or concerned
        """
        prompt = f"""Analyze this daily work report and reply with a single JSON object and nothing else.

The object must have exactly these keys:
- "summary": a one-sentence summary of the report
- "suggestions": a list of short, actionable pieces of advice based on the content
- "sentiment": the overall tone, one of "positive", "neutral", "concerned"

Write the summary and suggestions in the same language as the report.

Report:
{report_text}"""

        try:
            response = self._get_client().messages.create(
                model=self.model,
                max_tokens=1024,
                messages=[{
                    "role": "user",
                    "content": prompt
                }]
            )

            text = ""
            for block in response.content:
                if block.type == "text":
                    text += block.text

            return self._parse(text)

        except Exception as e:
            logger.error(f"AI analysis failed: {e}")
            return FALLBACK_ANALYSIS.model_copy(deep=True)

    def _parse(self, text: str) -> AIAnalysis:
        """Parse the model's JSON reply, tolerating surrounding prose or code fences."""
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end < start:
            logger.error("AI analysis returned no JSON object")
            return FALLBACK_ANALYSIS.model_copy(deep=True)

        try:
            data = json.loads(text[start:end + 1])
            return AIAnalysis.model_validate(data)
        except (ValueError, SchemaError) as e:
            logger.error(f"AI analysis returned an invalid payload: {e}")
            return FALLBACK_ANALYSIS.model_copy(deep=True)


def get_analyzer() -> ReportAnalyzer:
    """Dependency for FastAPI routes."""
    return ReportAnalyzer()
