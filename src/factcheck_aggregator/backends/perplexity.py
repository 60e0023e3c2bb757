from ..config import Settings, load_prompt
from ..schemas.credentials import BackendCredentials
from . import build_user_prompt
from .chat import ChatClient


class PerplexityBackend:
    """Single-call backend: Perplexity searches and writes the report itself."""

    name = "Perplexity"

    def __init__(self, settings: Settings):
        self.chat = ChatClient(self.name, settings.PERPLEXITY_BASE_URL, settings.PERPLEXITY_MODEL)

    def is_configured(self, credentials: BackendCredentials) -> bool:
        return bool(credentials.perplexity_api_key)

    async def query(self, selection, page_context, page_url, credentials: BackendCredentials) -> str:
        return await self.chat.complete(
            credentials.perplexity_api_key,
            system_prompt=load_prompt("factcheck_perplexity"),
            user_prompt=build_user_prompt(selection, page_context, page_url),
            extra_body={"return_citations": True},
        )
