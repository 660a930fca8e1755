"""Claude (Anthropic) Draft Provider"""

from ugh.config import Settings
from ugh.git.summarizer import ChangeSummary
from ugh.llm.base import (
    LLMProvider, AuthError, NetworkError, MalformedResponse, SYSTEM_PROMPT, parse_draft_response,
)
from ugh.models import Draft
from ugh.prompts import PromptBuilder, PromptConfig


class ClaudeProvider(LLMProvider):
    """Claude API provider. The API key comes from settings.llm_api_key."""

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    MAX_TOKENS = 1000
    TEMPERATURE = 0.3
    TIMEOUT = 60.0

    def __init__(self, client=None, prompt_builder: PromptBuilder | None = None, model: str | None = None):
        self._client = client
        self._client_key = None
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.model = model or self.DEFAULT_MODEL

    @property
    def name(self) -> str:
        return f"Claude ({self.model})"

    def _get_client(self, api_key: str):
        if self._client is not None and (self._client_key is None or self._client_key == api_key):
            return self._client

        from anthropic import Anthropic
        # max_retries=0: one attempt per invocation, failures fall back to the heuristic
        self._client = Anthropic(api_key=api_key, timeout=self.TIMEOUT, max_retries=0)
        self._client_key = api_key
        return self._client

    def generate_draft(self, summary: ChangeSummary, settings: Settings, hint: str | None = None) -> Draft:
        from anthropic import APIConnectionError, APIError, AuthenticationError, PermissionDeniedError

        if not settings.llm_api_key:
            raise AuthError("No LLM API key configured. Set llm_api_key or UGH_LLM_API_KEY.")
        if summary.is_empty:
            raise MalformedResponse("Nothing to summarize")

        model = settings.llm_model or self.model
        prompt = self.prompt_builder.build(summary, PromptConfig(hint=hint))

        try:
            response = self._get_client(settings.llm_api_key).messages.create(
                model=model,
                max_tokens=self.MAX_TOKENS,
                temperature=self.TEMPERATURE,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}]
            )
        except (AuthenticationError, PermissionDeniedError):
            raise AuthError("Invalid API key. Check llm_api_key.")
        except APIConnectionError as e:
            raise NetworkError(f"Could not reach Claude API: {e}")
        except APIError as e:
            raise NetworkError(f"Claude API error: {e.message}")

        content = ""
        for block in response.content:
            if block.type == "text":
                content = block.text.strip()
                break

        return parse_draft_response(content)
