"""
Submission Grader - grading engine for assessment submissions.

Scores multiple-choice and true/false questions by exact comparison,
sends open-ended questions to a generative-text service in one batch,
and falls back to conservative partial credit when that service is
unavailable, so every submission gets a complete result.
"""

__version__ = "1.0.0"
__author__ = "Submission Grader Team"
