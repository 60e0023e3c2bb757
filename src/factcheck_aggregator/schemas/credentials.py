from typing import Optional
from pydantic import BaseModel, ConfigDict

from ..config import Settings, get_settings


class BackendCredentials(BaseModel):
    """Named secrets per backend. A missing key means the backend is skipped."""
    model_config = ConfigDict(frozen=True)

    perplexity_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    toolhouse_api_key: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "BackendCredentials":
        settings = settings or get_settings()
        return cls(
            perplexity_api_key=settings.PERPLEXITY_API_KEY,
            groq_api_key=settings.GROQ_API_KEY,
            toolhouse_api_key=settings.TOOLHOUSE_API_KEY,
        )
