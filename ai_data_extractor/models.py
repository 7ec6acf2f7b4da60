"""
Extraction Models

Defines the result and error types returned by data extractors.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar, Union


class DataExtractorErrorType(str, Enum):
    """Closed set of failure categories an extractor can report."""

    VALIDATION_ERROR = 'VALIDATION_ERROR'
    PARSE_ERROR = 'PARSE_ERROR'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'


@dataclass(frozen=True)
class DataExtractorError:
    """
    A classified extraction failure.

    Returned in place of the extracted value, never raised.
    """

    kind: DataExtractorErrorType
    message: str


ResultT = TypeVar('ResultT')

ExtractionResult = Union[ResultT, DataExtractorError]


def is_extraction_error(result: Any) -> bool:
    """Return True if an extraction result is a DataExtractorError."""
    return isinstance(result, DataExtractorError)
