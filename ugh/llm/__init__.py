"""LLM Provider Package"""

from ugh.config import Settings
from ugh.errors import ConfigError
from ugh.llm.base import (
    LLMProvider, LLMError, NetworkError, AuthError, MalformedResponse,
    SYSTEM_PROMPT, parse_draft_response,
)
from ugh.llm.claude import ClaudeProvider

PROVIDERS = {
    "claude": ClaudeProvider,
}


def get_provider(settings: Settings) -> LLMProvider:
    """Get the draft provider named by settings.llm_provider."""
    if settings.llm_provider in PROVIDERS:
        return PROVIDERS[settings.llm_provider](model=settings.llm_model)

    raise ConfigError(
        f"Unknown LLM provider: {settings.llm_provider}. "
        f"Use one of: {', '.join(sorted(PROVIDERS))}."
    )


__all__ = [
    "LLMProvider",
    "LLMError",
    "NetworkError",
    "AuthError",
    "MalformedResponse",
    "ClaudeProvider",
    "get_provider",
    "PROVIDERS",
    "SYSTEM_PROMPT",
    "parse_draft_response",
]
