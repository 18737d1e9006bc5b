"""
Submission validation module.

Reports data-quality problems in a parsed submission. None of these stop
grading: the engine scores a misconfigured question as zero and carries
on. The checks exist so teachers can fix the assessment.
"""

from submission_grader.models import (
    KNOWN_KINDS,
    GradingRequest,
    MultipleChoiceQuestion,
    TrueFalseQuestion,
)


class SubmissionValidationError(Exception):
    """Raised when submission validation fails."""

    def __init__(self, issues: list[str]):
        self.issues = issues
        message = "Submission validation failed:\n" + "\n".join(f"  - {e}" for e in issues)
        super().__init__(message)


class SubmissionValidator:
    """
    Validates a grading request for assessment data-quality issues.

    Checks:
    1. Multiple-choice questions have exactly one correct option
    2. True/false answer keys are set to "true" or "false"
    3. Question kinds are recognised
    4. Answers refer to questions in the submission
    """

    TRUE_FALSE_VALUES = frozenset({"true", "false"})

    def validate(self, request: GradingRequest) -> tuple[bool, list[str]]:
        """
        Validate a request and return any issues found.

        Args:
            request: The request to validate.

        Returns:
            Tuple of (is_valid, list of issues).
        """
        issues: list[str] = []

        for index, question in enumerate(request.questions, start=1):
            prefix = f"Question {index} ({question.id})"

            if isinstance(question, MultipleChoiceQuestion):
                correct_count = len(question.correct_options)
                if correct_count == 0:
                    issues.append(f"{prefix}: No option is marked correct")
                elif correct_count > 1:
                    issues.append(
                        f"{prefix}: {correct_count} options are marked correct; "
                        "only the first will be used"
                    )

            elif isinstance(question, TrueFalseQuestion):
                if not (question.correct_answer or "").strip():
                    issues.append(f"{prefix}: No answer key is set")
                elif question.correct_answer.strip().lower() not in self.TRUE_FALSE_VALUES:
                    issues.append(
                        f"{prefix}: Answer key '{question.correct_answer}' is not true or false"
                    )

            elif question.kind not in KNOWN_KINDS:
                issues.append(
                    f"{prefix}: Unrecognised kind '{question.kind}', it will be graded as open-ended"
                )

        question_ids = {q.id for q in request.questions}
        unknown = sorted(set(request.answers) - question_ids)
        if unknown:
            issues.append(f"Answers given for unknown question ids: {unknown}")

        return len(issues) == 0, issues

    def validate_or_raise(self, request: GradingRequest) -> None:
        """
        Validate a request and raise if any issue is found.

        Args:
            request: The request to validate.

        Raises:
            SubmissionValidationError: If validation fails.
        """
        is_valid, issues = self.validate(request)
        if not is_valid:
            raise SubmissionValidationError(issues)
