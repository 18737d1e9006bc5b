"""
Submission parser module.

Turns a raw submission payload into a validated GradingRequest.
Accepts the JSON body the submission workflow sends:
{"questions": [...], "answers": {...}, "rubric": {...}}
"""

import json
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from submission_grader.models import GradingRequest


class SubmissionParseError(Exception):
    """Raised when a submission payload cannot be turned into a grading request."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        if self.errors:
            message = message + ":\n" + "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(message)


class SubmissionParser:
    """
    Parses submission payloads into GradingRequest models.

    Supports:
    1. JSON text or bytes
    2. Already-decoded mappings
    3. JSON files on disk
    """

    def parse(self, content: str | bytes | Mapping[str, Any]) -> GradingRequest:
        """
        Parse a submission payload.

        Args:
            content: JSON text, JSON bytes, or a decoded mapping.

        Returns:
            Validated GradingRequest.

        Raises:
            SubmissionParseError: If the payload is malformed, naming every violation.
        """
        if isinstance(content, (str, bytes)):
            data = self._decode(content)
        else:
            data = content

        if not isinstance(data, Mapping):
            raise SubmissionParseError(
                f"Submission must be a JSON object, got {type(data).__name__}"
            )

        try:
            return GradingRequest.model_validate(dict(data))
        except ValidationError as e:
            raise SubmissionParseError(
                "Invalid submission", errors=self._format_errors(e)
            ) from e

    def parse_file(self, path: Path | str) -> GradingRequest:
        """
        Parse a submission stored as a JSON file.

        Raises:
            SubmissionParseError: If the file cannot be read or parsed.
        """
        file_path = Path(path)
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SubmissionParseError(f"Cannot read submission file '{file_path}': {e}") from e
        return self.parse(content)

    def _decode(self, content: str | bytes) -> Any:
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise SubmissionParseError(f"Submission is not valid UTF-8: {e}") from e

        if not content.strip():
            raise SubmissionParseError("Submission content is empty")

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise SubmissionParseError(f"Submission is not valid JSON: {e}") from e

    @staticmethod
    def _format_errors(error: ValidationError) -> list[str]:
        """Render pydantic errors as 'location: message' lines."""
        lines: list[str] = []
        for item in error.errors():
            location = ".".join(str(part) for part in item["loc"]) or "submission"
            lines.append(f"{location}: {item['msg']}")
        return lines
