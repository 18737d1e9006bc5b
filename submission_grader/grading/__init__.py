"""
Grading Engine Module.

Core grading logic: rule-based scoring for closed questions, batched LLM
grading for open questions, and fallbacks when the service is unavailable.
"""

from submission_grader.grading.aggregator import AggregateScore, ScoreAggregator
from submission_grader.grading.base import (
    FallbackChain,
    GraderOutput,
    GradingError,
    QuestionGrader,
)
from submission_grader.grading.classifier import partition_questions
from submission_grader.grading.deterministic import DeterministicGrader
from submission_grader.grading.engine import GradingEngine
from submission_grader.grading.external import ExternalGrader
from submission_grader.grading.fallback import FallbackGrader
from submission_grader.grading.llm_client import LLMClient, LLMError
from submission_grader.grading.prompt_builder import PromptBuilder
from submission_grader.grading.scales import (
    GRADE_THRESHOLDS,
    SUMMARY_TEMPLATES,
    fallback_summary,
    grade_letter,
)
from submission_grader.grading.scorer import ResponseParser, ScoringError
from submission_grader.grading.summary import SummaryFeedbackGenerator

__all__ = [
    "AggregateScore",
    "DeterministicGrader",
    "ExternalGrader",
    "FallbackChain",
    "FallbackGrader",
    "GRADE_THRESHOLDS",
    "GraderOutput",
    "GradingEngine",
    "GradingError",
    "LLMClient",
    "LLMError",
    "PromptBuilder",
    "QuestionGrader",
    "ResponseParser",
    "SUMMARY_TEMPLATES",
    "ScoreAggregator",
    "ScoringError",
    "SummaryFeedbackGenerator",
    "fallback_summary",
    "grade_letter",
    "partition_questions",
]
