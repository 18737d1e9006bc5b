"""Split a question set into auto-gradable and externally-graded questions."""

from typing import Sequence

from submission_grader.models import Question


def partition_questions(
    questions: Sequence[Question],
) -> tuple[tuple[Question, ...], tuple[Question, ...]]:
    """
    Partition questions by how they are graded.

    Multiple-choice and true/false questions are auto-gradable. Every other
    kind, unknown ones included, goes to the external grader. Relative order
    is preserved within each group.

    Args:
        questions: Questions in display order.

    Returns:
        Tuple of (auto-gradable, externally-gradable) questions.
    """
    auto: list[Question] = []
    external: list[Question] = []

    for question in questions:
        if question.is_auto_gradable:
            auto.append(question)
        else:
            external.append(question)

    return tuple(auto), tuple(external)
