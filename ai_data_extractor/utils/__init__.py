"""
Utilities Package
Provider adapter, response parsing and the generation failure taxonomy.
"""

from .api_utils import (
    CompletionOutput,
    GenerateObjectResult,
    OpenAIChatModel,
    OpenAIProvider,
    create_openai,
    generate_object,
)
from .errors import (
    GenerationError,
    JSONParseError,
    NoObjectGeneratedError,
    TypeValidationError,
)
from .result_parser import ResultParser

__all__ = [
    'CompletionOutput',
    'GenerateObjectResult',
    'OpenAIChatModel',
    'OpenAIProvider',
    'create_openai',
    'generate_object',
    'GenerationError',
    'JSONParseError',
    'NoObjectGeneratedError',
    'TypeValidationError',
    'ResultParser',
]
