"""
Prompt builder for the generative-text service.

Constructs the two prompts the engine sends:
- One batched grading prompt covering every open-ended question
- One summary prompt carrying only the overall score
"""

import json
from decimal import Decimal
from typing import Any, Sequence

from submission_grader.models import GradingRequest, Question

NO_ANSWER_PLACEHOLDER = "No answer provided"


class PromptBuilder:
    """
    Builds prompts for batched grading and overall summary feedback.

    The grading prompt asks for a single JSON object keyed by question id
    so the response can be checked against exactly the questions sent.
    """

    SYSTEM_PROMPT = """You are an expert educational grader. Grade the following student answers based on the rubric and question requirements.

For each question, provide:
1. A score between 0 and the question's maxMarks
2. Constructive feedback explaining the grade

OUTPUT RULES:
- Return a JSON object with exactly this structure:
  {"grades": {"<question id>": {"score": <number>, "feedback": "<detailed feedback>"}}}
- Include every question id you were given, and no others.
- Do not add any text before or after the JSON.

Be fair but encouraging. Highlight what the student did well and areas for improvement."""

    SUMMARY_SYSTEM_PROMPT = (
        "You are a supportive teacher providing feedback. "
        "Keep it brief (2-3 sentences), encouraging, and actionable."
    )

    @staticmethod
    def build_question_context(
        questions: Sequence[Question], request: GradingRequest
    ) -> list[dict[str, Any]]:
        """
        Describe each question for the grading prompt.

        Args:
            questions: Open-ended questions to grade.
            request: The grading request holding the answers.

        Returns:
            One dict per question, in order.
        """
        context: list[dict[str, Any]] = []
        for question in questions:
            answer = request.answer_for(question.id)
            context.append(
                {
                    "id": question.id,
                    "question": question.text,
                    "type": question.kind,
                    "maxMarks": question.marks,
                    "expectedAnswer": question.correct_answer,
                    "studentAnswer": answer if answer.strip() else NO_ANSWER_PLACEHOLDER,
                }
            )
        return context

    @staticmethod
    def build_grading_prompt(questions: Sequence[Question], request: GradingRequest) -> str:
        """
        Build the user prompt for batched grading.

        Args:
            questions: Open-ended questions to grade.
            request: The grading request holding answers and rubric.

        Returns:
            The formatted user prompt.
        """
        context = PromptBuilder.build_question_context(questions, request)

        sections = [
            "Grade these student answers:",
            json.dumps(context, indent=2, ensure_ascii=False),
        ]

        if request.rubric:
            sections.append(f"Rubric: {json.dumps(request.rubric, ensure_ascii=False)}")

        sections.append("Return ONLY valid JSON.")
        return "\n\n".join(sections)

    @staticmethod
    def build_summary_prompt(percentage: Decimal | float, total_score: Any, max_score: Any) -> str:
        """Build the user prompt for overall feedback."""
        return (
            f"Student scored {float(percentage):.1f}% ({total_score}/{max_score}). "
            "Provide brief overall feedback."
        )

    @staticmethod
    def get_system_prompt() -> str:
        """Get the system prompt for batched grading."""
        return PromptBuilder.SYSTEM_PROMPT
