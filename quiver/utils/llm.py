"""
LLM provider abstraction for the relevance oracle.

Providers share one calling convention (system prompt + user prompt in, text
out) and ask for a JSON object reply. Only the provider's own rate-limit
exception is retried, with exponential backoff; every other failure reaches
the caller on the first attempt.

Providers are registered by name in PROVIDERS. The SDKs are optional extras
and are imported only when their provider is constructed.
"""

import json
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

MAX_RETRIES = 3
BASE_DELAY = 1.0
MAX_OUTPUT_TOKENS = 4096

T = TypeVar("T")


def _retry_with_backoff(
    operation: Callable[[], T],
    retryable_exception: Type[Exception],
    error_message: str,
) -> T:
    """
    Run operation, retrying up to MAX_RETRIES attempts on retryable_exception.

    Delays double from BASE_DELAY. The last failure is re-raised.

    Args:
        operation: Zero-argument callable performing one request
        retryable_exception: Only this exception type is retried
        error_message: Prefix for the retry warning
    """
    attempt = 1
    while True:
        try:
            return operation()
        except retryable_exception:
            if attempt >= MAX_RETRIES:
                raise
            delay = BASE_DELAY * 2 ** (attempt - 1)
            logger.warning(f"{error_message}; attempt {attempt}/{MAX_RETRIES} failed, waiting {delay:.1f}s")
            time.sleep(delay)
            attempt += 1


@dataclass
class LLMResponse:
    """Text reply with token usage."""

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


class LLMProvider(ABC):
    """
    Base class for oracle providers.

    A concrete provider declares its registry name, default model and the
    environment variable holding its API key, then implements _connect()
    (build the SDK client) and _call_api() (one request, no retries).
    Providers used in tests may skip __init__ and set model/name themselves
    through set_model().
    """

    provider_key: str = ""
    default_model: str = ""
    api_key_env: str = ""

    _retryable_exception: Type[Exception] = Exception
    _retry_message: str = "Rate limit hit"

    name: str
    model: str

    def __init__(self, model: Optional[str] = None):
        api_key = os.getenv(self.api_key_env)
        if not api_key:
            raise ValueError(f"{self.api_key_env} environment variable not set")
        self.client = self._connect(api_key)
        self.set_model(model or self.default_model)

    def set_model(self, model: str) -> None:
        self.model = model
        self.name = f"{self.provider_key}/{model}"

    @abstractmethod
    def _connect(self, api_key: str) -> Any:
        """Create the SDK client and set _retryable_exception."""

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """Single request without retries."""

    def generate(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        return _retry_with_backoff(
            lambda: self._call_api(system_prompt, user_prompt),
            self._retryable_exception,
            f"{self.name}: {self._retry_message}",
        )


class AnthropicProvider(LLMProvider):
    provider_key = "anthropic"
    default_model = "claude-sonnet-4-20250514"
    api_key_env = "ANTHROPIC_API_KEY"

    def _connect(self, api_key: str) -> Any:
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install quiver[llm]")
        self._retryable_exception = anthropic.RateLimitError
        return anthropic.Anthropic(api_key=api_key)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        message = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        text = "".join(block.text for block in message.content if getattr(block, "type", "") == "text")
        return LLMResponse(
            content=text,
            model=self.model,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )


class OpenAIProvider(LLMProvider):
    provider_key = "openai"
    default_model = "gpt-4o"
    api_key_env = "OPENAI_API_KEY"

    def _connect(self, api_key: str) -> Any:
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install quiver[llm]")
        self._retryable_exception = openai.RateLimitError
        return openai.OpenAI(api_key=api_key)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        completion = self.client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        usage = completion.usage
        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=self.model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )


PROVIDERS: Dict[str, Type[LLMProvider]] = {
    AnthropicProvider.provider_key: AnthropicProvider,
    OpenAIProvider.provider_key: OpenAIProvider,
}


def get_provider(provider_name: Optional[str] = None, model: Optional[str] = None) -> LLMProvider:
    """
    Build the oracle provider.

    Args:
        provider_name: Key in PROVIDERS (default: LLM_PROVIDER env variable, then "anthropic")
        model: Model override (default: the provider's default_model)

    Raises:
        ValueError: For an unknown provider or a missing API key
    """
    key = (provider_name or os.getenv("LLM_PROVIDER", "anthropic")).lower()
    if key not in PROVIDERS:
        raise ValueError(f"Unknown provider: {key}. Available: {sorted(PROVIDERS)}")
    return PROVIDERS[key](model)


def parse_object_response(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Recover a JSON object from an LLM reply.

    The reply is tried as-is, then the span from the first "{" to the last "}"
    is tried, which strips prose and code fences around the object.

    Returns:
        The object, or None if neither attempt yields a dict
    """
    text = (text or "").strip()
    start, end = text.find("{"), text.rfind("}")
    attempts = [text]
    if 0 <= start < end:
        attempts.append(text[start : end + 1])

    for candidate in attempts:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None
