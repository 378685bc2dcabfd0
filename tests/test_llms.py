# ---------- TESTS FOR LLM UTILITIES ----------

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import (
    APIConnectionError,
    APITimeoutError,
    BadRequestError,
    InternalServerError,
    RateLimitError,
)

from resumeai.config import settings
from resumeai.utils.exceptions import (
    ConfigurationError,
    PermanentCapabilityError,
    TransientCapabilityError,
)
from resumeai.utils.llms import (
    CapabilityRequest,
    OpenAICapability,
    classify_openai_error,
    extract_json,
)

# --- MOCK DATA ---

mock_request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def status_error(error_cls, status_code):
    return error_cls("upstream said no", response=httpx.Response(status_code, request=mock_request), body=None)


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def mock_client(**create_kwargs):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(**create_kwargs)
    return client


# --- EXTRACT JSON ---


def test_extract_json_from_markdown():
    """Test extraction of a JSON object wrapped in a code fence."""
    text = 'Here you go:\n```json\n{"name": "Ada", "skills": {"go": 1}}\n```\nThanks'
    assert extract_json(text) == '{"name": "Ada", "skills": {"go": 1}}'


def test_extract_json_ignores_braces_in_strings():
    """Test that braces inside string literals do not end the object."""
    text = 'prefix {"text": "use {braces} and \\"quotes\\" }"} suffix'
    assert extract_json(text) == '{"text": "use {braces} and \\"quotes\\" }"}'


@pytest.mark.parametrize("text", ["", "no json at all", '{"unbalanced": true'])
def test_extract_json_returns_none(text):
    """Test that text without a complete object yields None."""
    assert extract_json(text) is None


# --- ERROR CLASSIFICATION ---


@pytest.mark.parametrize(
    "error",
    [
        status_error(RateLimitError, 429),
        status_error(InternalServerError, 529),
        APIConnectionError(request=mock_request),
        APITimeoutError(request=mock_request),
    ],
)
def test_transient_errors(error):
    """Test that overload, rate limit and connection errors are transient."""
    assert isinstance(classify_openai_error(error), TransientCapabilityError)


@pytest.mark.parametrize("error", [status_error(BadRequestError, 400), ValueError("odd")])
def test_permanent_errors(error):
    """Test that every other error is permanent."""
    assert isinstance(classify_openai_error(error), PermanentCapabilityError)


# --- OPENAI CAPABILITY ---


def test_generate_sends_one_request():
    """Test the chat completion call made for a request."""
    client = mock_client(return_value=completion('{"ok": true}'))
    capability = OpenAICapability(model="gpt-test", client=client)
    request = CapabilityRequest(system_prompt="sys", user_prompt="user", max_tokens=100, temperature=0.1)

    text = asyncio.run(capability.generate(request))

    assert text == '{"ok": true}'
    client.chat.completions.create.assert_awaited_once()
    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "user"},
    ]
    assert kwargs["max_tokens"] == 100
    assert kwargs["temperature"] == 0.1
    assert kwargs["response_format"] == {"type": "json_object"}


def test_generate_plain_text_request():
    """Test that non-JSON requests do not ask for a JSON response format."""
    client = mock_client(return_value=completion("plain"))
    capability = OpenAICapability(client=client)

    asyncio.run(capability.generate(CapabilityRequest("sys", "user", json_output=False)))

    assert "response_format" not in client.chat.completions.create.await_args.kwargs


def test_generate_classifies_errors():
    """Test that SDK errors are raised as capability errors."""
    client = mock_client(side_effect=status_error(RateLimitError, 429))
    capability = OpenAICapability(client=client)

    with pytest.raises(TransientCapabilityError):
        asyncio.run(capability.generate(CapabilityRequest("sys", "user")))


@pytest.mark.parametrize("response", [completion(None), SimpleNamespace(choices=[])])
def test_generate_rejects_empty_responses(response):
    """Test that missing content is a permanent error."""
    capability = OpenAICapability(client=mock_client(return_value=response))

    with pytest.raises(PermanentCapabilityError):
        asyncio.run(capability.generate(CapabilityRequest("sys", "user")))


def test_missing_api_key():
    """Test that the first call without a key is a configuration error."""
    with patch.object(settings, "OPENAI_API_KEY", None):
        capability = OpenAICapability()

    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        asyncio.run(capability.generate(CapabilityRequest("sys", "user")))
