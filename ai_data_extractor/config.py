"""
Configuration Module
Loads OpenAI provider settings from the environment.
"""

import os
import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv

from .utils.api_utils import OpenAIProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_ENV_FILE = ".dev.vars"

T = TypeVar('T')


def _get_env(name: str, cast: Callable[[str], T]) -> Optional[T]:
    """Read an optional environment variable and convert it."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from e


@dataclass(frozen=True)
class ExtractorSettings:
    """Settings for the OpenAI-backed extractor."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: Optional[str] = None
    organization: Optional[str] = None
    compatibility: str = "strict"
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    @classmethod
    def from_env(cls, env_file: Optional[str] = DEFAULT_ENV_FILE) -> 'ExtractorSettings':
        """Build settings from environment variables.

        Variables from ``env_file`` are loaded first without overriding
        anything already set in the process environment.

        Args:
            env_file: Dotenv file to load, or None to skip loading

        Returns:
            ExtractorSettings: The loaded settings
        """
        if env_file and os.path.exists(env_file):
            logger.debug(f"Loading environment from {env_file}")
            load_dotenv(env_file, override=False)

        return cls(
            api_key=os.getenv("OPENAI_API_KEY"),
            model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            organization=os.getenv("OPENAI_ORGANIZATION") or None,
            compatibility=os.getenv("OPENAI_COMPATIBILITY") or "strict",
            temperature=_get_env("OPENAI_TEMPERATURE", float),
            max_tokens=_get_env("OPENAI_MAX_TOKENS", int),
        )

    def create_provider(self) -> OpenAIProvider:
        """Create an OpenAI provider handle from these settings."""
        return OpenAIProvider(
            api_key=self.api_key,
            base_url=self.base_url,
            organization=self.organization,
            compatibility=self.compatibility,
            temperature=self.temperature,
            max_tokens=self.max_tokens
        )
