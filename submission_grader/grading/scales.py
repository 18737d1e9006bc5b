"""
Score bands.

Both tables are ordered from the highest band down and are read top-down:
the first band whose lower bound the percentage reaches wins, so a
percentage sitting exactly on a bound belongs to the higher band.
"""

from decimal import Decimal

GRADE_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (90, "A+"),
    (80, "A"),
    (70, "B+"),
    (60, "B"),
    (50, "C"),
    (40, "D"),
)

FAILING_GRADE = "F"

SUMMARY_TEMPLATES: tuple[tuple[int, str], ...] = (
    (80, "Excellent work! Keep up the great performance."),
    (60, "Good effort! Review the areas where you lost marks."),
    (0, "Keep practicing! Focus on understanding the concepts better."),
)


def grade_letter(percentage: Decimal | float) -> str:
    """Map a percentage to its letter grade."""
    for lower_bound, letter in GRADE_THRESHOLDS:
        if percentage >= lower_bound:
            return letter
    return FAILING_GRADE


def fallback_summary(percentage: Decimal | float) -> str:
    """Templated overall feedback used when the summary call fails."""
    for lower_bound, sentence in SUMMARY_TEMPLATES:
        if percentage >= lower_bound:
            return sentence
    # Negative percentages cannot come out of the aggregator
    return SUMMARY_TEMPLATES[-1][1]
