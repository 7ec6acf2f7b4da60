from .ai_data_extractor import AiDataExtractor

__all__ = ['AiDataExtractor']
