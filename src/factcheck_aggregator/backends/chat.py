"""OpenAI-compatible chat client used by the fact-check backends.

Perplexity and Groq both expose the OpenAI chat-completions API, so one
wrapper around AsyncOpenAI serves both; only base_url and model differ.
"""

from typing import Optional
from openai import AsyncOpenAI, OpenAIError

from ..config import get_settings
from ..errors import BackendCallFailed
from ..log import get_logger

logger = get_logger("chat")


class ChatClient:
    def __init__(self, backend_name: str, base_url: str, model: str):
        self.backend_name = backend_name
        self.base_url = base_url
        self.model = model

    def _client(self, api_key: str) -> AsyncOpenAI:
        # Retries are disabled: a failed backend is excluded, not retried
        return AsyncOpenAI(
            api_key=api_key,
            base_url=self.base_url,
            max_retries=0,
            timeout=get_settings().BACKEND_TIMEOUT_S,
        )

    async def complete(
        self,
        api_key: str,
        system_prompt: str,
        user_prompt: str,
        extra_body: Optional[dict] = None,
    ) -> str:
        """Run one chat completion and return the first choice's text."""
        settings = get_settings()
        try:
            async with self._client(api_key) as client:
                response = await client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                    max_tokens=settings.MAX_TOKENS,
                    temperature=settings.TEMPERATURE,
                    extra_body=extra_body,
                )
        except OpenAIError as e:
            raise BackendCallFailed(self.backend_name, f"{type(e).__name__}: {e}") from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise BackendCallFailed(self.backend_name, f"Invalid response from {self.backend_name} API")
        content = choices[0].message.content
        if not content:
            raise BackendCallFailed(self.backend_name, f"Empty message in {self.backend_name} response")

        logger.debug(f"{self.backend_name} response ({len(content)} chars)")
        return content
