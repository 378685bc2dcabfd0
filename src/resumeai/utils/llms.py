"""
LLM Utilities - Generation Capability adapter and JSON extraction.

This module is the single seam between the agents and the external text
generation service.

Key Components:
    - CapabilityRequest: what an agent asks the capability for
    - GenerationCapability: protocol every capability adapter implements
    - OpenAICapability: adapter over the OpenAI chat completions API
    - classify_openai_error: maps SDK exceptions to transient/permanent errors
    - extract_json: pulls the JSON object out of a model response

Features:
    - Lazy client initialization, so importing this module never needs a key
    - Structured error classification by exception type (no message sniffing)
    - Response validation with comprehensive error reporting

Environment Variables:
    OPENAI_API_KEY: OpenAI API key (required when the first call is made)
    OPENAI_MODEL: Model name to use (default: gpt-4o-mini)

Note:
    The adapter makes exactly one API call per generate(). Retrying is the
    orchestrator's job, so the SDK's own retries are disabled.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)

from resumeai.config import settings
from resumeai.utils.exceptions import (
    CapabilityError,
    ConfigurationError,
    PermanentCapabilityError,
    TransientCapabilityError,
)

logger = logging.getLogger(__name__)

# Exception types the upstream service raises for overload and rate limiting
TRANSIENT_ERRORS = (RateLimitError, APIConnectionError, APITimeoutError, InternalServerError)


@dataclass(frozen=True)
class CapabilityRequest:
    """A single generation request built by an agent."""

    system_prompt: str
    user_prompt: str
    max_tokens: int = settings.DEFAULT_MAX_TOKENS
    temperature: float = settings.DEFAULT_TEMPERATURE
    json_output: bool = True


class GenerationCapability(Protocol):
    """Anything that turns a CapabilityRequest into response text.

    Implementations raise TransientCapabilityError for overload/rate limits
    and PermanentCapabilityError for everything that must not be retried.
    """

    async def generate(self, request: CapabilityRequest) -> str: ...


def classify_openai_error(error: Exception) -> CapabilityError:
    """Map an OpenAI SDK exception to the capability error taxonomy.

    Args:
        error: Exception raised by the OpenAI client.

    Returns:
        TransientCapabilityError for rate limits, connection problems, timeouts
        and 5xx (overloaded) responses; PermanentCapabilityError otherwise.
    """
    if isinstance(error, TRANSIENT_ERRORS):
        return TransientCapabilityError(f"{type(error).__name__}: {error}")
    if isinstance(error, APIError):
        return PermanentCapabilityError(f"{type(error).__name__}: {error}")
    return PermanentCapabilityError(f"Unexpected error: {type(error).__name__}: {error}")


class OpenAICapability:
    """Generation capability backed by OpenAI chat completions.

    Args:
        model: Model name. Defaults to settings.OPENAI_MODEL.
        api_key: API key. Defaults to settings.OPENAI_API_KEY.
        client: Optional pre-built AsyncOpenAI client (used by tests).
    """

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model or settings.OPENAI_MODEL
        self._api_key = api_key or settings.OPENAI_API_KEY
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the OpenAI client using lazy initialization."""
        if self._client is None:
            if not self._api_key:
                error_msg = (
                    "OPENAI_API_KEY not found in environment variables. "
                    "Please set OPENAI_API_KEY in your .env file or environment."
                )
                logger.error(error_msg)
                raise ConfigurationError(error_msg)
            # max_retries=0: the orchestrator owns the retry policy
            self._client = AsyncOpenAI(api_key=self._api_key, max_retries=0)
        return self._client

    async def generate(self, request: CapabilityRequest) -> str:
        """Call the chat completions API once.

        Args:
            request: The agent's capability request.

        Returns:
            The response text of the first choice.

        Raises:
            TransientCapabilityError: On rate limit, connection, timeout or overload.
            PermanentCapabilityError: On any other API error or an invalid response.
        """
        client = self._get_client()

        kwargs = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        if request.json_output:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)
        except Exception as e:
            classified = classify_openai_error(e)
            logger.warning(
                " LLM API call failed",
                extra={
                    "extra_fields": {
                        "error_type": type(e).__name__,
                        "transient": isinstance(classified, TransientCapabilityError),
                    }
                },
            )
            raise classified from e

        # Validate response structure
        if not response or not getattr(response, "choices", None):
            raise PermanentCapabilityError("OpenAI API returned empty choices array")

        message = response.choices[0].message
        text = getattr(message, "content", None) if message else None

        # Content can be None, e.g. when the model refuses
        if text is None:
            raise PermanentCapabilityError("OpenAI API returned None content in response")

        # Log first 500 characters for debugging (full response may be very long)
        logger.debug(" LLM response: %s", text[:500])

        return text


def extract_json(text: str) -> Optional[str]:
    """Extract the JSON object from raw LLM response text.

    LLMs often return JSON wrapped in markdown code blocks or with extra text.
    This function finds and extracts just the JSON portion by:
    1. Finding the first opening brace '{'
    2. Balancing braces to find the matching closing brace '}'
    3. Extracting the substring between them

    Braces inside JSON string literals are skipped.

    Args:
        text (str): The raw LLM response text (may contain markdown, explanations, etc.)

    Returns:
        Optional[str]:
            - The extracted JSON string if a balanced object is found
            - None if no valid JSON can be extracted

    Example:
        Input: "Here is the profile: ```json\\n{\\"name\\": \\"John\\"}\\n```"
        Output: '{"name": "John"}'
    """
    if not text:
        return None

    # Find where the JSON object starts (first opening brace)
    start = text.find("{")

    # If no opening brace found, there's no JSON
    if start == -1:
        return None

    # Balance braces to find the matching closing brace
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            # When braces are balanced, we've found the complete JSON object
            if depth == 0:
                return text[start : i + 1]

    # Fallback: the text may already be valid JSON
    try:
        json.loads(text)
        return text
    except ValueError:
        return None
