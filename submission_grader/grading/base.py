"""
Base classes for question graders.

Every way of scoring a batch of questions implements `QuestionGrader`, so
the engine and the aggregator can combine results without knowing which
implementation produced them.
"""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, NamedTuple, Sequence

from submission_grader.grading.llm_client import LLMError
from submission_grader.grading.scorer import ScoringError
from submission_grader.models import FeedbackEntry, GradingRequest, Question

logger = logging.getLogger(__name__)


class GradingError(Exception):
    """Raised when grader outputs break an internal invariant."""


class GraderOutput(NamedTuple):
    """Feedback for a batch of questions and the grader that produced it."""

    entries: dict[str, FeedbackEntry]
    grader_name: str


class QuestionGrader(ABC):
    """
    Abstract base class for question graders.

    Implementations return exactly one feedback entry per question they are
    given, keyed by question id.
    """

    name: ClassVar[str] = ""

    @abstractmethod
    async def grade(
        self, questions: Sequence[Question], request: GradingRequest
    ) -> dict[str, FeedbackEntry]:
        """
        Grade a batch of questions.

        Args:
            questions: The questions this grader is responsible for.
            request: The full request, for answers and rubric.

        Returns:
            Feedback entries keyed by question id.
        """

    async def grade_with_source(
        self, questions: Sequence[Question], request: GradingRequest
    ) -> GraderOutput:
        """Grade and tag the result with this grader's name."""
        entries = await self.grade(questions, request)
        return GraderOutput(entries=entries, grader_name=self.name)


class FallbackChain(QuestionGrader):
    """
    Run a primary grader and switch to a fallback if the primary fails.

    The fallback always takes over the whole batch; there is no per-question
    mixing of the two.
    """

    name = "fallback_chain"

    def __init__(self, primary: QuestionGrader, fallback: QuestionGrader):
        self._primary = primary
        self._fallback = fallback

    async def grade(
        self, questions: Sequence[Question], request: GradingRequest
    ) -> dict[str, FeedbackEntry]:
        output = await self.grade_with_source(questions, request)
        return output.entries

    async def grade_with_source(
        self, questions: Sequence[Question], request: GradingRequest
    ) -> GraderOutput:
        try:
            return await self._primary.grade_with_source(questions, request)
        except (LLMError, ScoringError) as e:
            logger.warning(
                "%s grading failed for %d question(s), using %s grader: %s",
                self._primary.name,
                len(questions),
                self._fallback.name,
                e,
            )
            return await self._fallback.grade_with_source(questions, request)
