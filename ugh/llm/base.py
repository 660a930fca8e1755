"""LLM Base Classes and Shared Code"""

import json
import re
from abc import ABC, abstractmethod

from ugh.config import Settings
from ugh.errors import ProviderTransientError
from ugh.git.summarizer import ChangeSummary
from ugh.models import Draft


SYSTEM_PROMPT = """You are a senior software engineer who turns work-in-progress diffs into clear tracker tickets.

Your standards:
- Titles are short, specific and imperative; never "Update files" or "Changes"
- Descriptions explain the intent of the change, not a line-by-line replay of the diff
- Branch slugs are a few meaningful lowercase words joined by dashes
- You answer with a single JSON object and nothing else"""


class LLMError(ProviderTransientError):
    """Raised when draft generation fails."""
    kind = "error"


class NetworkError(LLMError):
    """Connectivity problem, timeout, or provider-side outage."""
    kind = "network"


class AuthError(LLMError):
    """Missing or rejected credentials."""
    kind = "auth"


class MalformedResponse(LLMError):
    """The provider answered but the output is not a usable draft."""
    kind = "malformed"


_FENCE = re.compile(r'^```[a-zA-Z]*\s*|\s*```$')


def extract_json_object(text: str) -> str:
    """Strip code fences and preamble, returning the outermost {...} span."""
    cleaned = _FENCE.sub('', (text or '').strip())
    start = cleaned.find('{')
    end = cleaned.rfind('}')
    if start == -1 or end <= start:
        raise MalformedResponse(f"No JSON object in response. Got: {cleaned[:60]!r}")
    return cleaned[start:end + 1]


def parse_draft_response(text: str) -> Draft:
    """Validate provider output into a Draft or raise MalformedResponse."""
    try:
        data = json.loads(extract_json_object(text))
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Invalid JSON in response: {e.msg}")

    if not isinstance(data, dict):
        raise MalformedResponse("Response is not a JSON object")

    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise MalformedResponse("Response has no title")

    description = data.get('description', '')
    if isinstance(description, list):
        description = "\n".join(f"- {item}" for item in description)
    if not isinstance(description, str):
        raise MalformedResponse("Description is not text")

    suggested_type = data.get('type') or data.get('suggested_type')
    slug = data.get('slug') or data.get('suggested_slug')
    return Draft.build(
        title=title,
        description=description,
        suggested_type=suggested_type if isinstance(suggested_type, str) else None,
        suggested_slug=slug if isinstance(slug, str) else None,
    )


class LLMProvider(ABC):
    """Abstract base for draft providers."""

    @abstractmethod
    def generate_draft(self, summary: ChangeSummary, settings: Settings, hint: str | None = None) -> Draft:
        """Make exactly one attempt. Raises NetworkError, AuthError or MalformedResponse."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
