"""
Rule-based grading for closed-form questions.

Multiple-choice answers must match the correct option text exactly;
true/false answers are compared case-insensitively. Nothing here calls
out to a service and nothing here raises for bad data: a question that
cannot be scored gets zero and a note in its feedback.
"""

import logging
from decimal import Decimal
from typing import Sequence

from submission_grader.grading.base import QuestionGrader
from submission_grader.models import (
    FeedbackEntry,
    GradingRequest,
    MultipleChoiceQuestion,
    Question,
    TrueFalseQuestion,
)

logger = logging.getLogger(__name__)

CORRECT_FEEDBACK = "Correct! Well done."
INCORRECT_FEEDBACK = "Incorrect. The correct answer is: {answer}"
NO_CORRECT_OPTION_FEEDBACK = (
    "This question has no correct option configured, so it could not be scored. "
    "Please ask your teacher to review it."
)
NO_ANSWER_KEY_FEEDBACK = (
    "This question has no answer key configured, so it could not be scored. "
    "Please ask your teacher to review it."
)
NOT_AUTO_GRADABLE_FEEDBACK = "This question could not be graded automatically."


class DeterministicGrader(QuestionGrader):
    """Scores multiple-choice and true/false questions by exact comparison."""

    name = "deterministic"

    async def grade(
        self, questions: Sequence[Question], request: GradingRequest
    ) -> dict[str, FeedbackEntry]:
        entries: dict[str, FeedbackEntry] = {}

        for question in questions:
            answer = request.answer_for(question.id)

            if isinstance(question, MultipleChoiceQuestion):
                entries[question.id] = self._grade_multiple_choice(question, answer)
            elif isinstance(question, TrueFalseQuestion):
                entries[question.id] = self._grade_true_false(question, answer)
            else:
                # Only reachable if the classifier is bypassed
                logger.warning(
                    "Question %s of kind '%s' is not auto-gradable; scoring 0",
                    question.id,
                    question.kind,
                )
                entries[question.id] = FeedbackEntry(
                    score=Decimal(0), feedback=NOT_AUTO_GRADABLE_FEEDBACK
                )

        return entries

    def _grade_multiple_choice(
        self, question: MultipleChoiceQuestion, answer: str
    ) -> FeedbackEntry:
        correct_options = question.correct_options

        if not correct_options:
            logger.warning(
                "Configuration error: multiple-choice question %s has no correct option",
                question.id,
            )
            return FeedbackEntry(score=Decimal(0), feedback=NO_CORRECT_OPTION_FEEDBACK)

        if len(correct_options) > 1:
            logger.warning(
                "Configuration error: multiple-choice question %s has %d correct options; "
                "using the first one",
                question.id,
                len(correct_options),
            )

        expected = correct_options[0].text
        return self._entry(question, answer == expected, expected)

    def _grade_true_false(self, question: TrueFalseQuestion, answer: str) -> FeedbackEntry:
        expected = question.correct_answer

        if not expected or not expected.strip():
            logger.warning(
                "Configuration error: true/false question %s has no answer key",
                question.id,
            )
            return FeedbackEntry(score=Decimal(0), feedback=NO_ANSWER_KEY_FEEDBACK)

        return self._entry(question, answer.lower() == expected.lower(), expected)

    @staticmethod
    def _entry(question: Question, is_correct: bool, expected: str) -> FeedbackEntry:
        if is_correct:
            return FeedbackEntry(score=Decimal(question.marks), feedback=CORRECT_FEEDBACK)
        return FeedbackEntry(
            score=Decimal(0), feedback=INCORRECT_FEEDBACK.format(answer=expected)
        )
