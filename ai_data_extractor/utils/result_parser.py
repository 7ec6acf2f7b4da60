"""
Result Parser Module
Handles parsing of raw LLM responses into JSON values.
"""

import json
import logging
from typing import Any

from .errors import JSONParseError

logger = logging.getLogger(__name__)


class ResultParser:
    """Parses raw LLM API responses."""

    @staticmethod
    def strip_code_fence(response: str) -> str:
        """Remove surrounding whitespace and a single markdown code fence."""
        clean = response.strip()

        if clean.startswith('```'):
            lines = clean.split('\n')
            # Drop the opening fence line (``` or ```json)
            lines = lines[1:]
            if lines and lines[-1].strip() == '```':
                lines = lines[:-1]
            clean = '\n'.join(lines).strip()

        return clean

    @staticmethod
    def parse_json_response(response: str) -> Any:
        """Parse JSON from an LLM response.

        Models in JSON mode sometimes still wrap their answer in a markdown
        fence, so one fence is stripped before parsing. Output nested deeper
        than the decoder can recurse counts as unparseable.

        Args:
            response: Raw text response from the LLM

        Returns:
            Any: The parsed JSON value

        Raises:
            JSONParseError: If the text is not valid JSON. The error carries
                the original, unmodified response text.
        """
        clean = ResultParser.strip_code_fence(response)

        try:
            return json.loads(clean)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.debug(f"Failed to parse JSON from response: {response[:100]}...")
            raise JSONParseError(text=response, cause=e) from e
