from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
import yaml
from pathlib import Path
from typing import Optional

class Settings(BaseSettings):
    PERPLEXITY_API_KEY: Optional[str] = Field(None, description="Perplexity API key")
    GROQ_API_KEY: Optional[str] = Field(None, description="Groq API key")
    TOOLHOUSE_API_KEY: Optional[str] = Field(None, description="Toolhouse API key (search step for Groq)")

    PERPLEXITY_BASE_URL: str = "https://api.perplexity.ai"
    PERPLEXITY_MODEL: str = "sonar"
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama3-70b-8192"
    TOOLHOUSE_SEARCH_URL: str = "https://api.toolhouse.ai/v1/search"
    TOOLHOUSE_NUM_RESULTS: int = 5

    MAX_TOKENS: int = 2048
    TEMPERATURE: float = 0.1
    BACKEND_TIMEOUT_S: float = Field(60.0, description="Per-backend timeout, chained steps included")
    MAX_CONTEXT_CHARS: int = Field(8000, description="Page context is truncated to this many characters")
    PROMPTS_DIR: Optional[str] = Field(None, description="Directory whose prompts override the packaged ones")
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()

# Shipped as package data next to this module
PACKAGED_PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"

def _prompt_dirs() -> list:
    dirs = []
    if get_settings().PROMPTS_DIR:
        dirs.append(Path(get_settings().PROMPTS_DIR))
    dirs.append(PACKAGED_PROMPTS_DIR)
    return dirs

def load_prompt(name: str) -> str:
    """
    Load a prompt (.yaml first, then .md).
    PROMPTS_DIR, when set, is searched first; the packaged prompts are the fallback.
    """
    for prompts_dir in _prompt_dirs():
        yaml_path = prompts_dir / f"{name}.yaml"
        if yaml_path.exists():
            with open(yaml_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
                return data.get("content", "")

        md_path = prompts_dir / f"{name}.md"
        if md_path.exists():
            with open(md_path, "r", encoding="utf-8") as f:
                return f.read()

    raise FileNotFoundError(f"Prompt {name} not found as .yaml or .md")
