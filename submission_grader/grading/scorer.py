"""
Response parser for batched grading output.

Parses the JSON response from the LLM and checks it against the questions
that were sent. Every requested question must come back with a numeric
score; scores outside a question's range are clamped, since the service
is untrusted input.
"""

import json
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

from submission_grader.models import FeedbackEntry, Question

logger = logging.getLogger(__name__)

DEFAULT_FEEDBACK = "Graded by AI."


class ScoringError(Exception):
    """Raised when score parsing or validation fails."""

    def __init__(self, message: str, raw_response: str | None = None):
        self.raw_response = raw_response
        super().__init__(message)


class ResponseParser:
    """
    Parses and validates LLM grading responses.

    Ensures:
    1. Response is a JSON object
    2. It has a top-level "grades" object
    3. Every requested question id is present with a numeric score
    4. Scores are clamped to the question's marks
    """

    def parse(self, response: str, questions: Sequence[Question]) -> dict[str, FeedbackEntry]:
        """
        Parse an LLM response into per-question feedback.

        Args:
            response: Raw LLM response (expected JSON).
            questions: The questions that were sent for grading.

        Returns:
            Feedback entries keyed by question id, in question order.

        Raises:
            ScoringError: If parsing or validation fails.
        """
        data = self._load_json(response)

        if not isinstance(data, dict):
            raise ScoringError("Response is not a JSON object", raw_response=response)

        grades = data.get("grades")
        if not isinstance(grades, dict):
            raise ScoringError("Missing or invalid 'grades' object", raw_response=response)

        entries: dict[str, FeedbackEntry] = {}
        for question in questions:
            grade = grades.get(question.id)
            if not isinstance(grade, dict):
                raise ScoringError(
                    f"No grade returned for question '{question.id}'", raw_response=response
                )
            entries[question.id] = self._parse_grade(grade, question, response)

        return entries

    def _load_json(self, response: str) -> Any:
        """Decode the response, tolerating code fences and surrounding prose."""
        try:
            return json.loads(response)
        except (ValueError, RecursionError):
            pass

        json_str = self._extract_json(response)
        try:
            return json.loads(json_str)
        except (ValueError, RecursionError) as e:
            # RecursionError comes from pathologically nested documents
            raise ScoringError(
                f"Invalid JSON in response: {e}",
                raw_response=response,
            ) from e

    def _extract_json(self, response: str) -> str:
        """
        Extract JSON from response, handling common formats.

        Args:
            response: Raw response text.

        Returns:
            Extracted JSON string.
        """
        # Remove markdown code block if present
        json_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", response)
        if json_match:
            return json_match.group(1).strip()

        # Look for the outermost { }
        brace_start = response.find("{")
        if brace_start == -1:
            raise ScoringError("No JSON object found in response", raw_response=response)

        depth = 0
        for i, char in enumerate(response[brace_start:], start=brace_start):
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return response[brace_start : i + 1]

        raise ScoringError("Unclosed JSON object in response", raw_response=response)

    def _parse_grade(
        self, grade: dict[str, Any], question: Question, raw_response: str
    ) -> FeedbackEntry:
        score = self._parse_score(grade.get("score"), question.id, raw_response)

        max_points = Decimal(question.marks)
        clamped = min(max(score, Decimal(0)), max_points)
        if clamped != score:
            logger.info(
                "Clamped score for question %s from %s to %s", question.id, score, clamped
            )

        feedback = grade.get("feedback")
        if not isinstance(feedback, str) or not feedback.strip():
            feedback = DEFAULT_FEEDBACK

        return FeedbackEntry(score=clamped, feedback=feedback.strip())

    def _parse_score(self, value: Any, question_id: str, raw_response: str) -> Decimal:
        """
        Parse a score as Decimal.

        Args:
            value: Value to parse.
            question_id: Question id for error messages.
            raw_response: Original response for error reporting.

        Returns:
            Finite Decimal value.

        Raises:
            ScoringError: If the value is not a finite number.
        """
        # bool is an int subclass, but true/false is not a score
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ScoringError(
                f"Invalid score for question '{question_id}': {value!r}",
                raw_response=raw_response,
            )

        try:
            score = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ScoringError(
                f"Invalid score for question '{question_id}': {value!r}",
                raw_response=raw_response,
            ) from e

        if not score.is_finite():
            raise ScoringError(
                f"Non-finite score for question '{question_id}': {value!r}",
                raw_response=raw_response,
            )

        return score
