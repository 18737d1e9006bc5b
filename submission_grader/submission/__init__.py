"""
Submission Processing Module.

Provides parsing and validation of raw submission payloads.
"""

from submission_grader.submission.parser import SubmissionParseError, SubmissionParser
from submission_grader.submission.validator import (
    SubmissionValidationError,
    SubmissionValidator,
)

__all__ = [
    "SubmissionParser",
    "SubmissionParseError",
    "SubmissionValidator",
    "SubmissionValidationError",
]
