"""Batched grading of open-ended questions by the generative-text service."""

import logging
from typing import Sequence

from submission_grader.config import Settings, get_settings
from submission_grader.grading.base import QuestionGrader
from submission_grader.grading.llm_client import LLMClient
from submission_grader.grading.prompt_builder import PromptBuilder
from submission_grader.grading.scorer import ResponseParser
from submission_grader.models import FeedbackEntry, GradingRequest, Question

logger = logging.getLogger(__name__)


class ExternalGrader(QuestionGrader):
    """
    Sends all open-ended questions to the service in one call.

    Raises `LLMError` when the call fails or times out and `ScoringError`
    when the response does not cover every question. Callers that need a
    result regardless wrap this grader in a `FallbackChain`.
    """

    name = "external"

    def __init__(
        self,
        llm_client: LLMClient,
        settings: Settings | None = None,
        response_parser: ResponseParser | None = None,
    ):
        self._settings = settings or get_settings()
        self._llm_client = llm_client
        self._response_parser = response_parser or ResponseParser()

    async def grade(
        self, questions: Sequence[Question], request: GradingRequest
    ) -> dict[str, FeedbackEntry]:
        if not questions:
            return {}

        user_prompt = PromptBuilder.build_grading_prompt(questions, request)
        logger.debug("Requesting external grades for %d question(s)", len(questions))

        raw_response = await self._llm_client.generate(
            system_prompt=PromptBuilder.get_system_prompt(),
            user_prompt=user_prompt,
            timeout=self._settings.grading_timeout,
            json_mode=True,
        )

        return self._response_parser.parse(raw_response, questions)
