"""Two-step backend: Toolhouse web search feeding a Groq completion.

Both steps count as one backend. If the search step fails, Groq is not
called and the whole unit is reported as failed.
"""

from typing import Any, Dict, List

import httpx

from ..config import Settings, load_prompt
from ..errors import BackendCallFailed
from ..log import get_logger
from ..schemas.credentials import BackendCredentials
from .chat import ChatClient

logger = get_logger("groq_toolhouse")

NO_RESULTS = "No search results found."


def format_search_results(results: List[Dict[str, Any]]) -> str:
    if not results:
        return NO_RESULTS
    return "".join(
        f"Source {i}: {r.get('title', '')}\nURL: {r.get('url', '')}\nSnippet: {r.get('snippet', '')}\n\n"
        for i, r in enumerate(results, start=1)
    )


class ToolhouseSearch:
    def __init__(self, settings: Settings):
        self.url = settings.TOOLHOUSE_SEARCH_URL
        self.num_results = settings.TOOLHOUSE_NUM_RESULTS
        self.timeout = settings.BACKEND_TIMEOUT_S

    async def search(self, query: str, api_key: str) -> str:
        """
        Search for sources about `query`, formatted as numbered text blocks.
        Raises BackendCallFailed on transport, HTTP or JSON errors.
        """
        payload = {
            "query": f"Find reliable sources to fact check: {query}",
            "num_results": self.num_results,
            "include_domains": [],
            "exclude_domains": [],
            "time_period": "any",
        }
        headers = {"Authorization": f"Bearer {api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.url, json=payload, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise BackendCallFailed(GroqToolhouseBackend.name, f"Toolhouse search failed: {e}") from e

        if not isinstance(data, dict):
            raise BackendCallFailed(GroqToolhouseBackend.name, "Toolhouse search returned unexpected payload")
        results = data.get("results") or []
        logger.info(f"Toolhouse returned {len(results)} results")
        return format_search_results(results)


class GroqToolhouseBackend:
    name = "Groq"

    def __init__(self, settings: Settings):
        self.search = ToolhouseSearch(settings)
        self.chat = ChatClient(self.name, settings.GROQ_BASE_URL, settings.GROQ_MODEL)

    def is_configured(self, credentials: BackendCredentials) -> bool:
        return bool(credentials.groq_api_key and credentials.toolhouse_api_key)

    async def query(self, selection, page_context, page_url, credentials: BackendCredentials) -> str:
        search_results = await self.search.search(selection, credentials.toolhouse_api_key)
        user_prompt = f'Fact check the following selected text: "{selection}"\n\nSearch results:\n{search_results}'
        return await self.chat.complete(
            credentials.groq_api_key,
            system_prompt=load_prompt("factcheck_groq"),
            user_prompt=user_prompt,
        )
