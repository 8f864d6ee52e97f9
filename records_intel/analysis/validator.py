"""Parsing and structural validation of raw model output.

Malformed output is an expected condition, not an exception: every call
returns a ``ValidationOutcome`` that is either ok with a typed payload or
failed with a reason and the list of violations.
"""

import json
import re
from dataclasses import dataclass, field

import structlog
from pydantic import ValidationError

from records_intel.analysis.schemas import AnalysisResponse

logger = structlog.get_logger(__name__)

OPENING_FENCE = re.compile(r"^```(?:json)?\s*\n?", re.I)
CLOSING_FENCE = re.compile(r"\n?```\s*$")

MAX_REPORTED_VIOLATIONS = 3


@dataclass
class ValidationOutcome:
    """Result of validating one raw model response.

    Attributes:
        ok: True when the response parsed and matched the schema.
        payload: Validated response, set only when ok.
        reason: Human-readable failure reason, set only when not ok.
        violations: Individual schema violations ("path: message").
    """

    ok: bool
    payload: AnalysisResponse | None = None
    reason: str | None = None
    violations: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, payload: AnalysisResponse) -> "ValidationOutcome":
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, reason: str, violations: list[str] | None = None) -> "ValidationOutcome":
        return cls(ok=False, reason=reason, violations=violations or [])


def strip_code_fences(content: str) -> str:
    """Remove a leading ```/```json fence and a trailing ``` fence."""
    cleaned = OPENING_FENCE.sub("", content.strip())
    cleaned = CLOSING_FENCE.sub("", cleaned)
    return cleaned.strip()


def extract_json_object(text: str) -> str | None:
    """Return the largest balanced ``{...}`` span in the text.

    Braces inside JSON strings are ignored, so a ``}`` in a quoted value
    does not end the object early.

    Args:
        text: Text that may contain a JSON object among other content.

    Returns:
        The longest top-level balanced span, or None if there is none.
    """
    best: str | None = None
    depth = 0
    start_idx = None
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        if escape_next:
            escape_next = False
            continue
        if char == "\\" and in_string:
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char == "{":
            if depth == 0:
                start_idx = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start_idx is not None:
                span = text[start_idx:i + 1]
                if best is None or len(span) > len(best):
                    best = span
                start_idx = None

    return best


def _describe_errors(error: ValidationError) -> list[str]:
    violations = []
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"]) or "(root)"
        violations.append(f"{path}: {issue['msg']}")
    return violations


class ResponseValidator:
    """Turns raw model text into a validated ``AnalysisResponse``."""

    def validate(self, content: str) -> ValidationOutcome:
        """Parse and validate raw model output.

        The fence-stripped text is tried first; if it does not parse, the
        largest balanced object inside it is tried next. Nothing is
        repaired: a response with a stray trailing comma stays invalid.

        Args:
            content: Raw response text from the model.

        Returns:
            Tagged outcome. Never raises for malformed input.
        """
        if not content or not content.strip():
            return ValidationOutcome.failure("Empty response")

        cleaned = strip_code_fences(content)
        candidates = [cleaned]
        extracted = extract_json_object(cleaned)
        if extracted and extracted != cleaned:
            candidates.append(extracted)

        schema_violations: list[str] | None = None
        for candidate in candidates:
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                continue

            try:
                return ValidationOutcome.success(AnalysisResponse.model_validate(parsed))
            except ValidationError as e:
                schema_violations = _describe_errors(e)

        if schema_violations is not None:
            details = "; ".join(schema_violations[:MAX_REPORTED_VIOLATIONS])
            logger.debug("response_schema_invalid", violations=len(schema_violations))
            return ValidationOutcome.failure(
                f"Schema validation failed: {details}", schema_violations
            )

        return ValidationOutcome.failure("JSON parsing failed (no valid object found)")
