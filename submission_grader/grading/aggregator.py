"""
Score aggregation.

Merges grader outputs into a single feedback map and derives the totals,
the percentage and the letter grade. Arithmetic is done in Decimal so
percentages that land exactly on a grade boundary are not nudged below it.
"""

from decimal import Decimal
from typing import NamedTuple, Sequence

from submission_grader.grading.base import GraderOutput, GradingError
from submission_grader.grading.fallback import FallbackGrader
from submission_grader.grading.scales import grade_letter
from submission_grader.models import FeedbackEntry, Question


class AggregateScore(NamedTuple):
    """Totals and merged feedback for one submission."""

    total_score: Decimal
    max_score: Decimal
    percentage: Decimal
    grade_letter: str
    feedback: dict[str, FeedbackEntry]
    flagged_for_review: bool


class ScoreAggregator:
    """Combines per-grader results into submission totals."""

    def aggregate(self, questions: Sequence[Question], *outputs: GraderOutput) -> AggregateScore:
        """
        Merge grader outputs and compute totals.

        Args:
            questions: Every question in the submission, in display order.
            outputs: Results from each grader that ran.

        Returns:
            AggregateScore with feedback in question order.

        Raises:
            GradingError: If outputs overlap or a question has no feedback.
        """
        merged: dict[str, FeedbackEntry] = {}
        for output in outputs:
            overlap = merged.keys() & output.entries.keys()
            if overlap:
                raise GradingError(f"Questions graded more than once: {sorted(overlap)}")
            merged.update(output.entries)

        feedback: dict[str, FeedbackEntry] = {}
        for question in questions:
            if question.id not in merged:
                raise GradingError(f"No grader produced feedback for question '{question.id}'")
            feedback[question.id] = merged[question.id]

        total_score = sum((entry.score for entry in feedback.values()), Decimal(0))
        max_score = Decimal(sum(q.marks for q in questions))
        percentage = self.percentage(total_score, max_score)

        return AggregateScore(
            total_score=total_score,
            max_score=max_score,
            percentage=percentage,
            grade_letter=grade_letter(percentage),
            feedback=feedback,
            flagged_for_review=any(
                output.grader_name == FallbackGrader.name and output.entries
                for output in outputs
            ),
        )

    @staticmethod
    def percentage(total_score: Decimal, max_score: Decimal) -> Decimal:
        """Return the percentage score, or zero for an empty question set."""
        if max_score <= 0:
            return Decimal(0)
        return total_score / max_score * 100
