"""Overall narrative feedback for a graded submission."""

import logging
from decimal import Decimal

from submission_grader.config import Settings, get_settings
from submission_grader.grading.llm_client import LLMClient, LLMError
from submission_grader.grading.prompt_builder import PromptBuilder
from submission_grader.grading.scales import fallback_summary

logger = logging.getLogger(__name__)


class SummaryFeedbackGenerator:
    """
    Asks the service for a short summary of the student's performance.

    Only the percentage and raw totals are sent. Any failure falls back to
    a templated sentence for the score band, so this never raises.
    """

    def __init__(self, llm_client: LLMClient, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._llm_client = llm_client

    async def generate(self, percentage: Decimal, total_score: Decimal, max_score: Decimal) -> str:
        """
        Produce summary feedback.

        Args:
            percentage: Overall percentage score.
            total_score: Points awarded.
            max_score: Points available.

        Returns:
            Two or three sentences of feedback, or the band template.
        """
        try:
            content = await self._llm_client.generate(
                system_prompt=PromptBuilder.SUMMARY_SYSTEM_PROMPT,
                user_prompt=PromptBuilder.build_summary_prompt(percentage, total_score, max_score),
                max_tokens=300,
                timeout=self._settings.summary_timeout,
            )
        except LLMError as e:
            logger.warning("Summary feedback unavailable, using template: %s", e)
            return fallback_summary(percentage)

        summary = content.strip()
        if not summary:
            logger.warning("Summary feedback was blank, using template")
            return fallback_summary(percentage)

        return summary
