"""
API Utilities Module
Handles OpenAI API interactions and structured object generation.

The provider handle mirrors the shape callers expect from an AI SDK provider:
calling it with a model id returns a model target that ``generate_object``
can drive.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from openai import AsyncOpenAI
from pydantic import TypeAdapter, ValidationError

from .errors import NoObjectGeneratedError, TypeValidationError
from .result_parser import ResultParser

# Configure logging
logger = logging.getLogger(__name__)

COMPATIBILITY_MODES = ("strict", "compatible")

JSON_MODE_INSTRUCTION = "You MUST answer with a JSON object that matches the JSON schema above."


@dataclass(frozen=True)
class CompletionOutput:
    """Message content and metadata from one chat completion."""

    text: Optional[str]
    finish_reason: Optional[str] = None
    usage: Any = None
    refusal: Optional[str] = None


@dataclass(frozen=True)
class OpenAIChatModel:
    """A chat completion model bound to a client and request defaults."""

    client: Any
    model_id: str
    compatibility: str = "strict"
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    @property
    def supports_structured_outputs(self) -> bool:
        return self.compatibility == "strict"

    async def complete(
        self,
        messages: List[Dict[str, str]],
        response_format: Dict[str, Any]
    ) -> CompletionOutput:
        """Run one chat completion.

        Args:
            messages: Chat messages to send
            response_format: OpenAI ``response_format`` payload

        Returns:
            CompletionOutput: Message content, finish reason, usage and refusal
        """
        request: Dict[str, Any] = {
            "model": self.model_id,
            "messages": messages,
            "response_format": response_format,
        }
        if self.temperature is not None:
            request["temperature"] = self.temperature
        if self.max_tokens is not None:
            request["max_tokens"] = self.max_tokens

        logger.debug(f"Requesting chat completion from {self.model_id}")
        response = await self.client.chat.completions.create(**request)

        choice = response.choices[0]
        refusal = getattr(choice.message, "refusal", None)
        if refusal:
            logger.warning(f"Model {self.model_id} refused: {refusal}")

        return CompletionOutput(
            text=choice.message.content,
            finish_reason=choice.finish_reason,
            usage=getattr(response, "usage", None),
            refusal=refusal
        )


class OpenAIProvider:
    """Provider handle producing OpenAI chat models.

    Options are checked and the underlying ``AsyncOpenAI`` client is created
    when a model is first requested, so bad configuration surfaces when a
    request is made rather than here.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        organization: Optional[str] = None,
        compatibility: str = "strict",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        client: Optional[Any] = None
    ):
        """Initialize the provider.

        Args:
            api_key: OpenAI API key (the SDK reads OPENAI_API_KEY if None)
            base_url: Alternative API base URL
            organization: OpenAI organization id
            compatibility: "strict" for OpenAI structured outputs,
                "compatible" for JSON mode on OpenAI-compatible endpoints
            temperature: Sampling temperature, provider default if None
            max_tokens: Maximum tokens in the response
            client: Pre-built async client to use instead of creating one
        """
        self.api_key = api_key
        self.base_url = base_url
        self.organization = organization
        self.compatibility = compatibility
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                organization=self.organization
            )
        return self._client

    def __call__(self, model_id: str) -> OpenAIChatModel:
        if self.compatibility not in COMPATIBILITY_MODES:
            raise ValueError(
                f"Unknown compatibility '{self.compatibility}'. Expected one of: {list(COMPATIBILITY_MODES)}"
            )

        return OpenAIChatModel(
            client=self.client,
            model_id=model_id,
            compatibility=self.compatibility,
            temperature=self.temperature,
            max_tokens=self.max_tokens
        )


def create_openai(**kwargs) -> OpenAIProvider:
    """Convenience function to create an OpenAI provider."""
    return OpenAIProvider(**kwargs)


@dataclass(frozen=True)
class GenerateObjectResult:
    """Outcome of a successful ``generate_object`` call."""

    object: Any
    raw_text: str
    finish_reason: Optional[str] = None
    usage: Any = None


def _schema_name(schema: Any) -> str:
    name = getattr(schema, "__name__", "") or "response"
    return "".join(c if c.isalnum() or c in "_-" else "_" for c in name)


def _build_request(
    model: OpenAIChatModel,
    schema: Any,
    json_schema: Dict[str, Any],
    prompt: str,
    system: Optional[str]
) -> Tuple[List[Dict[str, str]], Dict[str, Any]]:
    """Build chat messages and the response format for the model's mode."""
    messages = []

    if model.supports_structured_outputs:
        if system:
            messages.append({"role": "system", "content": system})
        response_format = {
            "type": "json_schema",
            "json_schema": {
                "name": _schema_name(schema),
                "schema": json_schema,
                "strict": False,
            },
        }
    else:
        # JSON mode does not take a schema, so it goes into the system message
        parts = [system] if system else []
        parts.append(f"JSON schema:\n{json.dumps(json_schema)}\n{JSON_MODE_INSTRUCTION}")
        messages.append({"role": "system", "content": "\n\n".join(parts)})
        response_format = {"type": "json_object"}

    messages.append({"role": "user", "content": prompt})
    return messages, response_format


async def generate_object(
    model: OpenAIChatModel,
    schema: Any,
    prompt: str,
    system: Optional[str] = None
) -> GenerateObjectResult:
    """Generate an object conforming to ``schema`` from a prompt.

    Makes exactly one chat completion call. OpenAI SDK errors (network,
    authentication, rate limits, timeouts) propagate unchanged.

    Args:
        model: Model target obtained from a provider
        schema: Pydantic model class or any type ``TypeAdapter`` accepts
        prompt: User prompt
        system: Optional system prompt

    Returns:
        GenerateObjectResult: The validated object and response metadata

    Raises:
        NoObjectGeneratedError: If the model returned no content
        JSONParseError: If the content is not valid JSON
        TypeValidationError: If the parsed value does not match the schema
    """
    adapter = TypeAdapter(schema)
    messages, response_format = _build_request(
        model, schema, adapter.json_schema(), prompt, system
    )

    output = await model.complete(messages, response_format)
    if output.text is None:
        raise NoObjectGeneratedError(
            text=output.text,
            finish_reason=output.finish_reason,
            refusal=output.refusal
        )

    value = ResultParser.parse_json_response(output.text)

    try:
        obj = adapter.validate_python(value)
    except ValidationError as e:
        raise TypeValidationError(value=value, cause=e) from e

    return GenerateObjectResult(
        object=obj,
        raw_text=output.text,
        finish_reason=output.finish_reason,
        usage=output.usage
    )
