"""Value types handed between pipeline stages."""

import re
from dataclasses import dataclass
from enum import Enum

from ugh import BRANCH_TYPE_NAMES, DEFAULT_BRANCH_TYPE

MAX_TITLE_LENGTH = 100
MAX_SLUG_LENGTH = 50
FALLBACK_SLUG = "update"

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(-[a-z0-9]+)*$')
_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def sanitize_slug(text: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Lowercase, collapse non-alphanumerics to single dashes, cap the length.

    Cuts at a word boundary when possible and never returns an empty string.
    """
    slug = _NON_ALNUM.sub('-', (text or '').lower()).strip('-')
    if len(slug) > max_length:
        cut = slug[:max_length]
        if slug[max_length] != '-' and '-' in cut:
            cut = cut.rsplit('-', 1)[0]
        slug = cut.strip('-')
    return slug or FALLBACK_SLUG


def clamp_title(title: str, max_length: int = MAX_TITLE_LENGTH) -> str:
    """Single line, trimmed, at most max_length characters."""
    title = ' '.join((title or '').split())
    if len(title) <= max_length:
        return title
    cut = title[:max_length - 3].rsplit(' ', 1)[0] or title[:max_length - 3]
    return cut.rstrip(' .,;:-') + '...'


def coerce_branch_type(value: str | None) -> str:
    value = (value or '').strip().lower()
    return value if value in BRANCH_TYPE_NAMES else DEFAULT_BRANCH_TYPE


@dataclass(frozen=True)
class Draft:
    """Ticket content before it reaches the tracker."""
    title: str
    description: str
    suggested_type: str = DEFAULT_BRANCH_TYPE
    suggested_slug: str = FALLBACK_SLUG

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("Draft title must not be empty")
        if len(self.title) > MAX_TITLE_LENGTH:
            raise ValueError(f"Draft title longer than {MAX_TITLE_LENGTH} characters")
        if self.suggested_type not in BRANCH_TYPE_NAMES:
            raise ValueError(f"Unknown branch type: {self.suggested_type}")
        if not SLUG_PATTERN.match(self.suggested_slug):
            raise ValueError(f"Slug is not sanitized: {self.suggested_slug!r}")

    @classmethod
    def build(cls, title: str, description: str, suggested_type: str | None = None,
              suggested_slug: str | None = None) -> 'Draft':
        """Normalize loose input into a valid Draft."""
        title = clamp_title(title)
        return cls(
            title=title,
            description=(description or '').strip(),
            suggested_type=coerce_branch_type(suggested_type),
            suggested_slug=sanitize_slug(suggested_slug or title),
        )

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'description': self.description,
            'suggested_type': self.suggested_type,
            'suggested_slug': self.suggested_slug,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Draft':
        """Strict inverse of to_dict. Raises ValueError on invalid data."""
        values = {k: data.get(k) for k in ('title', 'description', 'suggested_type', 'suggested_slug')}
        if not all(isinstance(v, str) for v in values.values()):
            raise ValueError("Draft fields must be strings")
        return cls(**values)


class Provenance(str, Enum):
    """Where a draft came from. Used for messaging only."""
    CACHED = 'cached'
    GENERATED = 'generated'
    HEURISTIC = 'heuristic'


@dataclass(frozen=True)
class TicketRef:
    """A ticket the tracker has filed."""
    key: str
    url: str
