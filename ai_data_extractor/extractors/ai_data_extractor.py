"""
AI Data Extractor
Extracts structured data from free text with an LLM and a pydantic schema.
"""

import logging
from typing import Any, Callable, Generic, Optional, Type, TypeVar, Union

from ..base_extractor import DataExtractorInterface
from ..config import ExtractorSettings
from ..models import DataExtractorError, DataExtractorErrorType
from ..utils.api_utils import generate_object
from ..utils.errors import JSONParseError, TypeValidationError, stringify_value

logger = logging.getLogger(__name__)

EXTRACTION_INSTRUCTION = (
    "Extract the following data from the given text, "
    "please try to find the best matching values for the fields:"
)

SchemaT = TypeVar('SchemaT')


class AiDataExtractor(DataExtractorInterface[str, SchemaT], Generic[SchemaT]):
    """Extracts data matching a schema from text using an AI provider.

    The extractor keeps no state between calls, so one instance can serve
    concurrent ``extract`` calls.
    """

    def __init__(
        self,
        ai_provider: Callable[[str], Any],
        ai_model: str,
        schema: Type[SchemaT]
    ):
        """Initialize the extractor.

        Nothing is validated here; a bad provider or model id is reported
        by ``extract`` as an UNKNOWN_ERROR.

        Args:
            ai_provider: Provider handle returning a model target for a model id
            ai_model: Model id to use
            schema: Pydantic model describing the output data
        """
        self.ai_provider = ai_provider
        self.ai_model = ai_model
        self.schema = schema

    @classmethod
    def from_settings(
        cls,
        schema: Type[SchemaT],
        settings: Optional[ExtractorSettings] = None
    ) -> 'AiDataExtractor[SchemaT]':
        """Create an extractor using OpenAI settings from the environment.

        Provider options are only checked on the first ``extract`` call. When
        ``settings`` is None they are read with ``ExtractorSettings.from_env``,
        which raises ValueError for a malformed numeric variable before any
        extractor exists.
        """
        settings = settings or ExtractorSettings.from_env()
        return cls(settings.create_provider(), settings.model, schema)

    def build_prompt(self, input: str) -> str:
        """Embed the input text in the extraction instruction."""
        return f"{EXTRACTION_INSTRUCTION}\n\n{input}"

    async def extract(self, input: str) -> Union[SchemaT, DataExtractorError]:
        """Extract data from the input according to the schema.

        Args:
            input: The input text to process

        Returns:
            The extracted object, or a DataExtractorError if generation failed
        """
        try:
            logger.debug(f"Extracting {getattr(self.schema, '__name__', self.schema)} with {self.ai_model}")
            result = await generate_object(
                model=self.ai_provider(self.ai_model),
                schema=self.schema,
                prompt=self.build_prompt(input)
            )

            return result.object

        except Exception as error:
            return self.handle_error(error)

    def handle_error(self, error: Exception) -> DataExtractorError:
        """Classify a failure of the generation step.

        Validation failures are checked before parse failures; anything not
        recognized becomes an UNKNOWN_ERROR.
        """
        if TypeValidationError.is_instance(error):
            extractor_error = DataExtractorError(
                kind=DataExtractorErrorType.VALIDATION_ERROR,
                message=stringify_value(error.value)
            )
        elif JSONParseError.is_instance(error):
            extractor_error = DataExtractorError(
                kind=DataExtractorErrorType.PARSE_ERROR,
                message=error.text
            )
        else:
            extractor_error = DataExtractorError(
                kind=DataExtractorErrorType.UNKNOWN_ERROR,
                message=f"{type(error).__name__}: {error}"
            )

        logger.warning(f"Extraction failed with {extractor_error.kind.value}")
        return extractor_error
