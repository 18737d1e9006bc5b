"""
Grading engine - the core orchestrator.

Classifies questions, grades closed-form and open-ended questions
concurrently, aggregates the scores and adds summary feedback.
Every failure of the generative-text service is absorbed by a fallback,
so a valid request always produces a complete GradingResult.
"""

import asyncio
import logging
import time
from typing import Any, Mapping

from submission_grader.config import Settings, get_settings
from submission_grader.grading.aggregator import ScoreAggregator
from submission_grader.grading.base import FallbackChain
from submission_grader.grading.classifier import partition_questions
from submission_grader.grading.deterministic import DeterministicGrader
from submission_grader.grading.external import ExternalGrader
from submission_grader.grading.fallback import FallbackGrader
from submission_grader.grading.llm_client import LLMClient
from submission_grader.grading.summary import SummaryFeedbackGenerator
from submission_grader.models import GradingRequest, GradingResult
from submission_grader.submission import SubmissionParser

logger = logging.getLogger(__name__)


class GradingEngine:
    """
    Main grading engine.

    Holds no per-request state, so one engine can grade many submissions
    concurrently.
    """

    def __init__(self, settings: Settings | None = None, llm_client: LLMClient | None = None):
        """
        Initialize the grading engine.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
            llm_client: Client for the generative-text service. Built from settings if omitted.
        """
        self._settings = settings or get_settings()
        self._llm_client = llm_client or LLMClient(self._settings)

        self._deterministic_grader = DeterministicGrader()
        self._open_ended_grader = FallbackChain(
            primary=ExternalGrader(self._llm_client, self._settings),
            fallback=FallbackGrader(self._settings.fallback_partial_credit),
        )
        self._aggregator = ScoreAggregator()
        self._summary_generator = SummaryFeedbackGenerator(self._llm_client, self._settings)
        self._submission_parser = SubmissionParser()

    async def grade(self, request: GradingRequest) -> GradingResult:
        """
        Grade a submission.

        Args:
            request: Validated questions, answers and optional rubric.

        Returns:
            The complete GradingResult.
        """
        started = time.perf_counter()

        auto_questions, open_questions = partition_questions(request.questions)
        logger.debug(
            "Grading %d auto-gradable and %d open-ended question(s)",
            len(auto_questions),
            len(open_questions),
        )

        auto_output, open_output = await asyncio.gather(
            self._deterministic_grader.grade_with_source(auto_questions, request),
            self._open_ended_grader.grade_with_source(open_questions, request),
        )

        score = self._aggregator.aggregate(request.questions, auto_output, open_output)

        summary = await self._summary_generator.generate(
            score.percentage, score.total_score, score.max_score
        )

        result = GradingResult(
            total_score=score.total_score,
            max_score=score.max_score,
            percentage=float(score.percentage),
            grade_letter=score.grade_letter,
            feedback=score.feedback,
            summary_feedback=summary,
            flagged_for_review=score.flagged_for_review,
        )

        logger.info(
            "Graded %d question(s): %s/%s (%.1f%%, %s)%s in %.2fs",
            len(request.questions),
            result.total_score,
            result.max_score,
            result.percentage,
            result.grade_letter,
            " [fallback]" if result.flagged_for_review else "",
            time.perf_counter() - started,
        )
        return result

    async def grade_payload(self, payload: str | bytes | Mapping[str, Any]) -> GradingResult:
        """
        Parse a raw submission payload and grade it.

        Raises:
            SubmissionParseError: If the payload is not a valid grading request.
        """
        request = self._submission_parser.parse(payload)
        return await self.grade(request)

    def grade_sync(self, request: GradingRequest) -> GradingResult:
        """Grade from synchronous code. Must not be called inside a running event loop."""
        return asyncio.run(self.grade(request))

    async def health_check(self) -> bool:
        """
        Check if the generative-text service is reachable.

        Returns:
            True if the LLM API is reachable.
        """
        return await self._llm_client.health_check()
