"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

from submission_grader.config import Settings
from submission_grader.models import (
    GradingRequest,
    MultipleChoiceQuestion,
    OpenEndedQuestion,
    QuestionOption,
    TrueFalseQuestion,
)

SUMMARY_TEXT = "Solid work overall. Revisit photosynthesis inputs before the next quiz."


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ==============================================================================
# Sample Question Fixtures
# ==============================================================================


@pytest.fixture
def mcq_question() -> MultipleChoiceQuestion:
    """Multiple-choice question worth 2 marks, correct option 'B'."""
    return MultipleChoiceQuestion(
        id="q1",
        text="Which letter comes second?",
        marks=2,
        options=(
            QuestionOption(text="A", is_correct=False),
            QuestionOption(text="B", is_correct=True),
            QuestionOption(text="C", is_correct=False),
        ),
    )


@pytest.fixture
def true_false_question() -> TrueFalseQuestion:
    """True/false question worth 1 mark."""
    return TrueFalseQuestion(
        id="q2",
        text="Plants need sunlight for photosynthesis.",
        marks=1,
        correct_answer="true",
    )


@pytest.fixture
def short_answer_question() -> OpenEndedQuestion:
    """Short-answer question worth 4 marks."""
    return OpenEndedQuestion(
        id="q3",
        kind="short_answer",
        text="Name the two inputs of photosynthesis besides light.",
        marks=4,
        correct_answer="Carbon dioxide and water",
    )


@pytest.fixture
def long_answer_question() -> OpenEndedQuestion:
    """Long-answer question worth 3 marks."""
    return OpenEndedQuestion(
        id="q4",
        kind="long_answer",
        text="Explain why leaves are green.",
        marks=3,
    )


@pytest.fixture
def sample_request(
    mcq_question: MultipleChoiceQuestion,
    true_false_question: TrueFalseQuestion,
    short_answer_question: OpenEndedQuestion,
    long_answer_question: OpenEndedQuestion,
) -> GradingRequest:
    """A mixed submission with every question answered."""
    return GradingRequest(
        questions=(
            mcq_question,
            true_false_question,
            short_answer_question,
            long_answer_question,
        ),
        answers={
            "q1": "B",
            "q2": "False",
            "q3": "Water and carbon dioxide",
            "q4": "Chlorophyll reflects green light.",
        },
        rubric={"q3": "Both inputs required for full marks"},
    )


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Raw submission body as the submission workflow sends it."""
    return {
        "questions": [
            {
                "id": "q1",
                "question_text": "Which letter comes second?",
                "question_type": "mcq",
                "options": [
                    {"text": "A", "isCorrect": False},
                    {"text": "B", "isCorrect": True},
                ],
                "correct_answer": None,
                "marks": 2,
            },
            {
                "id": "q2",
                "question_text": "Explain why leaves are green.",
                "question_type": "long_answer",
                "options": [],
                "correct_answer": None,
                "marks": 3,
            },
        ],
        "answers": {"q1": "B"},
    }


# ==============================================================================
# LLM Response Fixtures
# ==============================================================================


@pytest.fixture
def sample_llm_response() -> str:
    """Grading response covering both open-ended questions of sample_request."""
    return json.dumps(
        {
            "grades": {
                "q3": {"score": 3, "feedback": "Both inputs named, but no detail."},
                "q4": {"score": 2.5, "feedback": "Correct idea, explanation is brief."},
            }
        }
    )


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with mocked values."""
    return Settings(
        llm_api_key="test-api-key-for-testing",
        llm_base_url="https://test.api.local/",
        llm_model="test-model",
        llm_temperature=0.0,
        llm_max_retries=0,
        grading_timeout=5.0,
        summary_timeout=5.0,
        fallback_partial_credit=0.5,
    )


# ==============================================================================
# Mock Fixtures
# ==============================================================================


@pytest.fixture
def summary_text() -> str:
    """Summary returned by mock clients unless a test overrides it."""
    return SUMMARY_TEXT


@pytest.fixture
def make_llm_client() -> Callable[..., MagicMock]:
    """
    Build a mock LLM client.

    Grading calls (json_mode=True) get `grading`, summary calls get `summary`.
    Either may be an exception instance to simulate a failure.
    """

    def factory(grading: str | Exception = "{}", summary: str | Exception = SUMMARY_TEXT) -> MagicMock:
        def generate(system_prompt: str, user_prompt: str, **kwargs: Any) -> str:
            outcome = grading if kwargs.get("json_mode") else summary
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        client = MagicMock()
        client.generate = AsyncMock(side_effect=generate)
        client.health_check = AsyncMock(return_value=True)
        return client

    return factory


@pytest.fixture
def mock_llm_client(make_llm_client: Callable[..., MagicMock], sample_llm_response: str) -> MagicMock:
    """Mock client returning sample_llm_response for grading."""
    return make_llm_client(grading=sample_llm_response)


# ==============================================================================
# File Fixtures
# ==============================================================================


@pytest.fixture
def submission_file(temp_dir: Path, sample_payload: dict[str, Any]) -> Path:
    """Write sample_payload to a JSON file."""
    file_path = temp_dir / "submission.json"
    file_path.write_text(json.dumps(sample_payload), encoding="utf-8")
    return file_path
