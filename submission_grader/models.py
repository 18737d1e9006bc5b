"""
Pydantic models for the submission grader.

These models define the strict schemas for:
- Assessment questions, one variant per question kind
- The grading request handed to the engine (questions, answers, rubric)
- Per-question feedback and the final grading result

Input models accept both the camelCase wire names used by the assessment
store and snake_case field names. Output models are frozen and strict.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    PlainSerializer,
    Tag,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


def _decimal_to_number(value: Decimal) -> int | float:
    """Serialize whole scores as ints and fractional scores as floats."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Score = Annotated[Decimal, PlainSerializer(_decimal_to_number, when_used="json")]


# ==============================================================================
# Question Models
# ==============================================================================


class QuestionKind(str, Enum):
    """Known question kinds."""

    MCQ = "mcq"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    LONG_ANSWER = "long_answer"


# Compared against raw kind strings, so hold the values rather than the members
AUTO_GRADABLE_KINDS = frozenset({QuestionKind.MCQ.value, QuestionKind.TRUE_FALSE.value})
KNOWN_KINDS = frozenset(kind.value for kind in QuestionKind)


class QuestionOption(BaseModel):
    """One choice of a multiple-choice question."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(..., description="Option text shown to the student")

    is_correct: bool = Field(
        default=False,
        alias="isCorrect",
        description="Whether this option is the correct answer",
    )


class _QuestionBase(BaseModel):
    """Fields shared by every question variant."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(
        ...,
        min_length=1,
        description="Identifier of the question, unique within a grading request",
    )

    text: str = Field(
        ...,
        validation_alias=AliasChoices("text", "question_text"),
        description="Prompt shown to the student",
    )

    marks: int = Field(
        ...,
        ge=1,
        description="Maximum score for this question",
    )

    correct_answer: str | None = Field(
        default=None,
        validation_alias=AliasChoices("correctAnswer", "correct_answer"),
        description="Canonical correct answer, also used as a hint for external grading",
    )

    @property
    def is_auto_gradable(self) -> bool:
        """Closed-form questions are scored by exact comparison."""
        return self.kind in AUTO_GRADABLE_KINDS  # type: ignore[attr-defined]


_KIND_ALIASES = AliasChoices("kind", "question_type")


class MultipleChoiceQuestion(_QuestionBase):
    """A question answered by picking one of several options."""

    kind: Literal["mcq"] = Field(default="mcq", validation_alias=_KIND_ALIASES)

    options: tuple[QuestionOption, ...] = Field(
        default=(),
        description="Ordered answer options; an empty list is scored as misconfigured",
    )

    @field_validator("options", mode="before")
    @classmethod
    def default_missing_options(cls, v: Any) -> Any:
        """Treat a null options list as empty."""
        return () if v is None else v

    @property
    def correct_options(self) -> tuple[QuestionOption, ...]:
        """Options flagged as correct, in order."""
        return tuple(option for option in self.options if option.is_correct)


class TrueFalseQuestion(_QuestionBase):
    """
    A question answered with true or false.

    The answer key is compared case-insensitively. A missing key is a
    configuration problem and the question scores zero.
    """

    kind: Literal["true_false"] = Field(default="true_false", validation_alias=_KIND_ALIASES)


class OpenEndedQuestion(_QuestionBase):
    """
    A free-text question graded by the generative-text service.

    Any kind that is not closed-form lands here, including kinds this
    package does not know about, so they are never silently scored as zero.
    """

    kind: str = Field(..., min_length=1, validation_alias=_KIND_ALIASES)


def _question_tag(value: Any) -> str:
    """Pick the question variant from the raw kind value."""
    if isinstance(value, dict):
        kind = value.get("kind", value.get("question_type"))
    else:
        kind = getattr(value, "kind", None)
    if isinstance(kind, str) and kind in AUTO_GRADABLE_KINDS:
        return kind
    return "open"


Question = Annotated[
    Union[
        Annotated[MultipleChoiceQuestion, Tag(QuestionKind.MCQ.value)],
        Annotated[TrueFalseQuestion, Tag(QuestionKind.TRUE_FALSE.value)],
        Annotated[OpenEndedQuestion, Tag("open")],
    ],
    Discriminator(_question_tag),
]


# ==============================================================================
# Request Model
# ==============================================================================


class GradingRequest(BaseModel):
    """
    Everything the engine needs to grade one submission.

    Question ids must be unique. Answers keyed by ids that are missing are
    treated as unanswered.
    """

    model_config = ConfigDict(frozen=True)

    questions: tuple[Question, ...] = Field(
        default=(),
        description="Assessment questions in display order",
    )

    answers: dict[str, str | None] = Field(
        default_factory=dict,
        description="Student answers keyed by question id",
    )

    rubric: dict[str, Any] | None = Field(
        default=None,
        description="Optional grading criteria forwarded verbatim to the service",
    )

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "GradingRequest":
        """Ensure no two questions share an id."""
        ids = [q.id for q in self.questions]
        if len(ids) != len(set(ids)):
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            raise ValueError(f"Duplicate question ids found: {duplicates}")
        return self

    def answer_for(self, question_id: str) -> str:
        """Return the submitted answer, or an empty string when unanswered."""
        return self.answers.get(question_id) or ""

    @property
    def max_score(self) -> int:
        """Sum of marks across all questions."""
        return sum(q.marks for q in self.questions)


# ==============================================================================
# Result Models
# ==============================================================================


class FeedbackEntry(BaseModel):
    """Score and feedback for a single question."""

    model_config = ConfigDict(frozen=True, strict=True)

    score: Score = Field(
        ...,
        ge=0,
        description="Points awarded (0 to the question's marks)",
    )

    feedback: str = Field(
        ...,
        min_length=1,
        description="Feedback text for the student",
    )

    @field_validator("score", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Decimal:
        """Convert numeric values to Decimal for precision."""
        if isinstance(v, Decimal):
            return v
        return Decimal(str(v))


class GradingResult(BaseModel):
    """
    Complete grading result for a student submission.

    Serialized with camelCase keys so the caller can persist it as-is.
    Carries no timestamps or generated ids: identical inputs and identical
    service responses give identical results.
    """

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    total_score: Score = Field(..., ge=0, description="Sum of awarded scores")

    max_score: Score = Field(..., ge=0, description="Sum of marks over all questions")

    percentage: float = Field(..., ge=0, le=100, description="Score as a percentage")

    grade_letter: str = Field(..., min_length=1, description="Letter grade for the percentage")

    feedback: dict[str, FeedbackEntry] = Field(
        default_factory=dict,
        description="Per-question feedback keyed by question id",
    )

    summary_feedback: str = Field(..., description="Short narrative on overall performance")

    flagged_for_review: bool = Field(
        default=False,
        description="Whether fallback grading was used for any question",
    )

    @field_validator("total_score", "max_score", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Decimal:
        """Convert numeric values to Decimal for precision."""
        if isinstance(v, Decimal):
            return v
        return Decimal(str(v))

    @model_validator(mode="after")
    def validate_totals(self) -> "GradingResult":
        """Ensure the total matches the feedback and stays within the maximum."""
        if self.total_score > self.max_score:
            raise ValueError(
                f"Total score ({self.total_score}) cannot exceed max score ({self.max_score})"
            )
        summed = sum((entry.score for entry in self.feedback.values()), Decimal(0))
        if summed != self.total_score:
            raise ValueError(
                f"Total score ({self.total_score}) doesn't match feedback sum ({summed})"
            )
        return self

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int | None = None) -> str:
        """Return the JSON document with camelCase keys."""
        return self.model_dump_json(by_alias=True, indent=indent)
