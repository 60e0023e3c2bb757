"""Fact-check backends.

Each backend turns (selection, page context, page url) into a raw report in
the four-section text convention, or raises BackendCallFailed.
"""

from typing import List, Optional, Protocol

from ..config import Settings, get_settings
from ..schemas.credentials import BackendCredentials


class FactCheckBackend(Protocol):
    name: str

    def is_configured(self, credentials: BackendCredentials) -> bool:
        ...

    async def query(
        self,
        selection: str,
        page_context: str,
        page_url: str,
        credentials: BackendCredentials,
    ) -> str:
        ...


def build_user_prompt(selection: str, page_context: str = "", page_url: str = "") -> str:
    prompt = f'Fact check the following selected text: "{selection}"'
    if page_context:
        limit = get_settings().MAX_CONTEXT_CHARS
        prompt += f"\n\nBroader context from the page:\n{page_context[:limit]}"
    if page_url:
        prompt += f"\n\nPage URL: {page_url}"
    return prompt


def get_backends(settings: Optional[Settings] = None) -> List[FactCheckBackend]:
    """Backends in attribution order: the primary backend comes first."""
    from .perplexity import PerplexityBackend
    from .groq_toolhouse import GroqToolhouseBackend

    settings = settings or get_settings()
    return [PerplexityBackend(settings), GroqToolhouseBackend(settings)]
