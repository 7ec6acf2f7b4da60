"""
AI Data Extractor Package
Provides structured data extraction from free text using OpenAI's language models.

RoomBooking is an example schema: pass any pydantic model to AiDataExtractor.
"""

from .models import DataExtractorError, DataExtractorErrorType, ExtractionResult, is_extraction_error
from .base_extractor import DataExtractorInterface
from .config import ExtractorSettings
from .extractors.ai_data_extractor import AiDataExtractor
from .schemas import RoomBooking
from .utils.api_utils import OpenAIProvider, create_openai, generate_object

__all__ = [
    'DataExtractorError',
    'DataExtractorErrorType',
    'ExtractionResult',
    'is_extraction_error',
    'DataExtractorInterface',
    'ExtractorSettings',
    'AiDataExtractor',
    'RoomBooking',
    'OpenAIProvider',
    'create_openai',
    'generate_object',
]
