"""Conservative partial-credit grading used when the service is unavailable."""

from decimal import ROUND_FLOOR, Decimal
from typing import Sequence

from submission_grader.grading.base import QuestionGrader
from submission_grader.models import FeedbackEntry, GradingRequest, Question

PENDING_REVIEW_FEEDBACK = "Your answer has been received. Manual review pending."
NO_ANSWER_FEEDBACK = "No answer provided."


class FallbackGrader(QuestionGrader):
    """
    Awards a fixed share of marks to every answered question.

    Blank answers score zero. The share is rounded down to whole marks.
    """

    name = "fallback"

    def __init__(self, partial_credit: float = 0.5):
        self._partial_credit = Decimal(str(partial_credit))

    async def grade(
        self, questions: Sequence[Question], request: GradingRequest
    ) -> dict[str, FeedbackEntry]:
        entries: dict[str, FeedbackEntry] = {}

        for question in questions:
            if request.answer_for(question.id).strip():
                score = (Decimal(question.marks) * self._partial_credit).to_integral_value(
                    rounding=ROUND_FLOOR
                )
                entries[question.id] = FeedbackEntry(
                    score=score, feedback=PENDING_REVIEW_FEEDBACK
                )
            else:
                entries[question.id] = FeedbackEntry(
                    score=Decimal(0), feedback=NO_ANSWER_FEEDBACK
                )

        return entries
