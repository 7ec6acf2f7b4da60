"""
Base Extractor Module
Defines the interface shared by all data extractors.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Union

from .models import DataExtractorError

InputT = TypeVar('InputT')
ResultT = TypeVar('ResultT')


class DataExtractorInterface(ABC, Generic[InputT, ResultT]):
    """Interface for extractors turning an input into structured data."""

    @abstractmethod
    async def extract(self, input: InputT) -> Union[ResultT, DataExtractorError]:
        """Extract data from the given input.

        Args:
            input: The input data

        Returns:
            The extracted data, or a DataExtractorError describing the failure
        """
        pass
