"""
Generation Errors Module
Failure taxonomy raised by structured object generation.
"""

import json
from typing import Any, Optional


def stringify_value(value: Any) -> str:
    """Render a generated value for diagnostics.

    Strings are returned as-is, JSON-compatible values are JSON encoded and
    anything else falls back to ``str()``.
    """
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


class GenerationError(Exception):
    """Base class for failures of the generation step."""

    @classmethod
    def is_instance(cls, error: Any) -> bool:
        """Return True if ``error`` belongs to this failure category."""
        return isinstance(error, cls)


class JSONParseError(GenerationError):
    """The model output could not be parsed as JSON."""

    def __init__(self, text: str, cause: Optional[BaseException] = None):
        self.text = text
        self.cause = cause
        super().__init__(f"JSON parsing failed: Text: {text}.\nError message: {cause}")


class TypeValidationError(GenerationError):
    """The parsed model output does not conform to the schema."""

    def __init__(self, value: Any, cause: Optional[BaseException] = None):
        self.value = value
        self.cause = cause
        super().__init__(
            f"Type validation failed: Value: {stringify_value(value)}.\nError message: {cause}"
        )


class NoObjectGeneratedError(GenerationError):
    """The model returned no content to build an object from."""

    def __init__(
        self,
        text: Optional[str] = None,
        finish_reason: Optional[str] = None,
        refusal: Optional[str] = None
    ):
        self.text = text
        self.finish_reason = finish_reason
        self.refusal = refusal
        message = f"No object generated (finish reason: {finish_reason})"
        if refusal:
            message = f"{message}. Model refused: {refusal}"
        super().__init__(message)
