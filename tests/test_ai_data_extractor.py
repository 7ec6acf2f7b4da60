"""
Tests for the AiDataExtractor module.

Validates prompt construction, pass-through of generated objects and the
classification of generation failures.
"""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ai_data_extractor.config import ExtractorSettings
from ai_data_extractor.extractors.ai_data_extractor import AiDataExtractor, EXTRACTION_INSTRUCTION
from ai_data_extractor.models import DataExtractorError, DataExtractorErrorType, is_extraction_error
from ai_data_extractor.schemas import RoomBooking
from ai_data_extractor.utils.api_utils import GenerateObjectResult, OpenAIProvider
from ai_data_extractor.utils.errors import JSONParseError, NoObjectGeneratedError, TypeValidationError

BOOKING_TEXT = (
    "Hi, my name is John Doe. I would like to book a room for 2024-08-15 "
    "from 10:00 AM until 2:00 PM."
)


class TestAiDataExtractor(unittest.IsolatedAsyncioTestCase):
    """Test suite for AiDataExtractor."""

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.generate_patcher = patch(
            'ai_data_extractor.extractors.ai_data_extractor.generate_object',
            new_callable=AsyncMock
        )
        self.mock_generate = self.generate_patcher.start()

        self.mock_model = MagicMock(name="model")
        self.mock_provider = MagicMock(return_value=self.mock_model)

        self.extractor = AiDataExtractor(self.mock_provider, "gpt-4o-mini", RoomBooking)

    def tearDown(self):
        """Clean up after each test method."""
        self.generate_patcher.stop()

    def test_initialization_does_not_touch_provider(self):
        """Test that construction only stores its configuration."""
        self.assertIs(self.extractor.ai_provider, self.mock_provider)
        self.assertEqual(self.extractor.ai_model, "gpt-4o-mini")
        self.assertIs(self.extractor.schema, RoomBooking)
        self.mock_provider.assert_not_called()

    def test_build_prompt(self):
        """Test that the prompt embeds the literal input after the instruction."""
        prompt = self.extractor.build_prompt("some text")
        self.assertEqual(
            prompt,
            "Extract the following data from the given text, please try to find "
            "the best matching values for the fields:\n\nsome text"
        )
        self.assertTrue(prompt.startswith(EXTRACTION_INSTRUCTION))

    async def test_extract_returns_generated_object(self):
        """Test that a generated object is returned unchanged."""
        booking = RoomBooking(name="John Doe", date="2024-08-15", fromTime="10:00", toTime="14:00")
        self.mock_generate.return_value = GenerateObjectResult(object=booking, raw_text="{}")

        result = await self.extractor.extract(BOOKING_TEXT)

        self.assertIs(result, booking)
        self.assertFalse(is_extraction_error(result))

    async def test_extract_calls_generation_once(self):
        """Test the arguments passed to the generation step."""
        self.mock_generate.return_value = GenerateObjectResult(object={}, raw_text="{}")

        await self.extractor.extract(BOOKING_TEXT)

        self.mock_provider.assert_called_once_with("gpt-4o-mini")
        self.mock_generate.assert_awaited_once_with(
            model=self.mock_model,
            schema=RoomBooking,
            prompt=self.extractor.build_prompt(BOOKING_TEXT)
        )

    async def test_validation_error(self):
        """Test that a schema mismatch becomes a VALIDATION_ERROR with the value."""
        partial = {"name": "John Doe", "date": "2024-08-15"}
        self.mock_generate.side_effect = TypeValidationError(value=partial)

        result = await self.extractor.extract(BOOKING_TEXT)

        self.assertEqual(result, DataExtractorError(
            kind=DataExtractorErrorType.VALIDATION_ERROR,
            message='{"name": "John Doe", "date": "2024-08-15"}'
        ))

    async def test_validation_error_with_string_value(self):
        """Test that a string value is used as the message as-is."""
        self.mock_generate.side_effect = TypeValidationError(value="not an object")

        result = await self.extractor.extract(BOOKING_TEXT)

        self.assertEqual(result.kind, DataExtractorErrorType.VALIDATION_ERROR)
        self.assertEqual(result.message, "not an object")

    async def test_parse_error(self):
        """Test that unparseable output becomes a PARSE_ERROR with the raw text."""
        self.mock_generate.side_effect = JSONParseError(text="Sorry, I can't do that")

        result = await self.extractor.extract(BOOKING_TEXT)

        self.assertEqual(result, DataExtractorError(
            kind=DataExtractorErrorType.PARSE_ERROR,
            message="Sorry, I can't do that"
        ))

    async def test_unknown_error(self):
        """Test that any other failure becomes an UNKNOWN_ERROR."""
        self.mock_generate.side_effect = RuntimeError("connection reset")

        result = await self.extractor.extract(BOOKING_TEXT)

        self.assertEqual(result, DataExtractorError(
            kind=DataExtractorErrorType.UNKNOWN_ERROR,
            message="RuntimeError: connection reset"
        ))

    async def test_no_object_generated_is_unknown(self):
        """Test that other generation errors fall into UNKNOWN_ERROR."""
        self.mock_generate.side_effect = NoObjectGeneratedError(finish_reason="length")

        result = await self.extractor.extract(BOOKING_TEXT)

        self.assertEqual(result.kind, DataExtractorErrorType.UNKNOWN_ERROR)
        self.assertIn("NoObjectGeneratedError", result.message)
        self.assertIn("length", result.message)

    async def test_provider_failure_is_unknown(self):
        """Test that a failing provider handle is reported, not raised."""
        self.mock_provider.side_effect = ValueError("unknown model")

        result = await self.extractor.extract(BOOKING_TEXT)

        self.assertEqual(result, DataExtractorError(
            kind=DataExtractorErrorType.UNKNOWN_ERROR,
            message="ValueError: unknown model"
        ))
        self.mock_generate.assert_not_awaited()

    async def test_cancellation_propagates(self):
        """Test that task cancellation is not converted into an error value."""
        self.mock_generate.side_effect = asyncio.CancelledError()

        with self.assertRaises(asyncio.CancelledError):
            await self.extractor.extract(BOOKING_TEXT)

    async def test_concurrent_calls_are_independent(self):
        """Test that concurrent calls each get the result for their own input."""
        async def fake_generate(model, schema, prompt):
            text = prompt.split("\n\n", 1)[1]
            # Finish in reverse order of submission
            await asyncio.sleep(0.01 if text == "first" else 0)
            if text == "broken":
                raise JSONParseError(text=text)
            return GenerateObjectResult(object={"echo": text}, raw_text=text)

        self.mock_generate.side_effect = fake_generate

        results = await asyncio.gather(
            self.extractor.extract("first"),
            self.extractor.extract("second"),
            self.extractor.extract("broken"),
        )

        self.assertEqual(results[0], {"echo": "first"})
        self.assertEqual(results[1], {"echo": "second"})
        self.assertEqual(results[2], DataExtractorError(DataExtractorErrorType.PARSE_ERROR, "broken"))
        self.assertEqual(self.mock_generate.await_count, 3)


class TestHandleError(unittest.TestCase):
    """Test suite for error classification."""

    def setUp(self):
        self.extractor = AiDataExtractor(MagicMock(), "gpt-4o-mini", RoomBooking)

    def test_each_failure_maps_to_one_kind(self):
        cases = [
            (TypeValidationError(value={"a": 1}), DataExtractorErrorType.VALIDATION_ERROR),
            (JSONParseError(text="{"), DataExtractorErrorType.PARSE_ERROR),
            (KeyError("missing"), DataExtractorErrorType.UNKNOWN_ERROR),
        ]
        for error, kind in cases:
            with self.subTest(error=type(error).__name__):
                self.assertEqual(self.extractor.handle_error(error).kind, kind)

    def test_non_json_value_falls_back_to_str(self):
        value = {"when": object()}
        result = self.extractor.handle_error(TypeValidationError(value=value))
        self.assertEqual(result.message, str(value))


class TestFromSettings(unittest.TestCase):
    """Test suite for building an extractor from settings."""

    def test_from_settings(self):
        settings = ExtractorSettings(api_key="sk-test", model="gpt-4.1-mini", compatibility="compatible")

        extractor = AiDataExtractor.from_settings(RoomBooking, settings)

        self.assertIsInstance(extractor.ai_provider, OpenAIProvider)
        self.assertEqual(extractor.ai_provider.api_key, "sk-test")
        self.assertEqual(extractor.ai_provider.compatibility, "compatible")
        self.assertEqual(extractor.ai_model, "gpt-4.1-mini")
        self.assertIs(extractor.schema, RoomBooking)

    def test_from_settings_loads_environment(self):
        with patch('ai_data_extractor.extractors.ai_data_extractor.ExtractorSettings.from_env') as mock_from_env:
            mock_from_env.return_value = ExtractorSettings(api_key="sk-env")
            extractor = AiDataExtractor.from_settings(RoomBooking)

        mock_from_env.assert_called_once_with()
        self.assertEqual(extractor.ai_model, "gpt-4o-mini")


if __name__ == '__main__':
    pytest.main([__file__])
