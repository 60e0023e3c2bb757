from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from factcheck_aggregator.backends import build_user_prompt, get_backends
from factcheck_aggregator.backends.chat import ChatClient
from factcheck_aggregator.backends.groq_toolhouse import (
    NO_RESULTS,
    GroqToolhouseBackend,
    ToolhouseSearch,
    format_search_results,
)
from factcheck_aggregator.backends.perplexity import PerplexityBackend
from factcheck_aggregator.config import get_settings
from factcheck_aggregator.errors import BackendCallFailed
from factcheck_aggregator.schemas.credentials import BackendCredentials


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_backend_configuration_rules():
    """
    WHY: A backend without its keys is skipped, not failed.
    HOW: Check each backend against partial credential sets.
    EXPECTED: Perplexity needs its key; Groq needs both the Groq and Toolhouse keys.
    """
    perplexity, groq = get_backends(get_settings())

    assert perplexity.is_configured(BackendCredentials(perplexity_api_key="pk"))
    assert not perplexity.is_configured(BackendCredentials(groq_api_key="gk"))
    assert not groq.is_configured(BackendCredentials(groq_api_key="gk"))
    assert groq.is_configured(BackendCredentials(groq_api_key="gk", toolhouse_api_key="tk"))


def test_user_prompt_includes_context_and_url():
    prompt = build_user_prompt("The sky is green.", "Weather article", "https://news.example/a")
    assert prompt.startswith('Fact check the following selected text: "The sky is green."')
    assert "Broader context from the page:\nWeather article" in prompt
    assert prompt.endswith("Page URL: https://news.example/a")


def test_user_prompt_truncates_context():
    limit = get_settings().MAX_CONTEXT_CHARS
    prompt = build_user_prompt("claim", "~" * (limit + 500))
    assert prompt.count("~") == limit


@pytest.mark.asyncio
async def test_chat_client_returns_first_choice():
    with patch("factcheck_aggregator.backends.chat.AsyncOpenAI") as MockOpenAI:
        client = MockOpenAI.return_value.__aenter__.return_value
        client.chat.completions.create = AsyncMock(return_value=_completion("Truth: 80%"))

        text = await ChatClient("Perplexity", "https://api.example", "sonar").complete("key", "sys", "user")

    assert text == "Truth: 80%"
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "sonar"
    assert kwargs["messages"][0] == {"role": "system", "content": "sys"}
    assert MockOpenAI.call_args.kwargs["max_retries"] == 0


@pytest.mark.asyncio
async def test_chat_client_missing_choices_fails():
    with patch("factcheck_aggregator.backends.chat.AsyncOpenAI") as MockOpenAI:
        client = MockOpenAI.return_value.__aenter__.return_value
        client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=[]))

        with pytest.raises(BackendCallFailed) as exc:
            await ChatClient("Groq", "https://api.example", "m").complete("key", "sys", "user")

    assert exc.value.backend == "Groq"
    assert exc.value.reason == "Invalid response from Groq API"


@pytest.mark.asyncio
async def test_chat_client_wraps_api_errors():
    """
    WHY: Network/HTTP errors from the SDK must surface as BackendCallFailed for the orchestrator.
    HOW: Make the completion call raise an APIConnectionError.
    EXPECTED: BackendCallFailed naming the backend.
    """
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.example"))
    with patch("factcheck_aggregator.backends.chat.AsyncOpenAI") as MockOpenAI:
        client = MockOpenAI.return_value.__aenter__.return_value
        client.chat.completions.create = AsyncMock(side_effect=error)

        with pytest.raises(BackendCallFailed) as exc:
            await ChatClient("Perplexity", "https://api.example", "sonar").complete("key", "sys", "user")

    assert "APIConnectionError" in exc.value.reason


@pytest.mark.asyncio
async def test_perplexity_query_uses_prompt_and_key():
    backend = PerplexityBackend(get_settings())
    creds = BackendCredentials(perplexity_api_key="pk")

    with patch.object(backend.chat, "complete", AsyncMock(return_value="raw")) as mock_complete:
        result = await backend.query("claim", "page text", "https://p.example", creds)

    assert result == "raw"
    args, kwargs = mock_complete.call_args
    assert args[0] == "pk"
    assert "Sources:" in kwargs["system_prompt"]
    assert "page text" in kwargs["user_prompt"]
    assert kwargs["extra_body"] == {"return_citations": True}


def test_format_search_results():
    results = [{"title": "T", "url": "https://t.example", "snippet": "S"}]
    assert format_search_results(results) == "Source 1: T\nURL: https://t.example\nSnippet: S\n\n"
    assert format_search_results([]) == NO_RESULTS


@pytest.mark.asyncio
async def test_toolhouse_search_posts_query():
    with patch("httpx.AsyncClient") as MockClient:
        instance = MockClient.return_value.__aenter__.return_value
        response = MagicMock()
        response.json.return_value = {"results": [{"title": "T", "url": "https://t.example", "snippet": "S"}]}
        instance.post = AsyncMock(return_value=response)

        text = await ToolhouseSearch(get_settings()).search("claim", "tk")

    assert text.startswith("Source 1: T")
    kwargs = instance.post.call_args.kwargs
    assert kwargs["json"]["query"] == "Find reliable sources to fact check: claim"
    assert kwargs["headers"] == {"Authorization": "Bearer tk"}


@pytest.mark.asyncio
async def test_failed_search_skips_groq():
    """
    WHY: The search and synthesis steps are one unit; no synthesis without search results.
    HOW: Make the Toolhouse POST raise, spy on the Groq chat call.
    EXPECTED: BackendCallFailed for Groq; the chat step is never awaited.
    """
    backend = GroqToolhouseBackend(get_settings())
    creds = BackendCredentials(groq_api_key="gk", toolhouse_api_key="tk")

    with patch("httpx.AsyncClient") as MockClient, \
            patch.object(backend.chat, "complete", AsyncMock(return_value="raw")) as mock_complete:
        instance = MockClient.return_value.__aenter__.return_value
        instance.post = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(BackendCallFailed) as exc:
            await backend.query("claim", "", "", creds)

    assert exc.value.backend == "Groq"
    assert exc.value.reason.startswith("Toolhouse search failed")
    mock_complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_groq_query_feeds_search_results():
    backend = GroqToolhouseBackend(get_settings())
    creds = BackendCredentials(groq_api_key="gk", toolhouse_api_key="tk")

    with patch.object(backend.search, "search", AsyncMock(return_value="Source 1: T\n")), \
            patch.object(backend.chat, "complete", AsyncMock(return_value="raw")) as mock_complete:
        result = await backend.query("claim", "", "", creds)

    assert result == "raw"
    args, kwargs = mock_complete.call_args
    assert args[0] == "gk"
    assert kwargs["user_prompt"].endswith("Search results:\nSource 1: T\n")
