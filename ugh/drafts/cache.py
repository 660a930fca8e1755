"""Draft Cache - Reuse generated drafts for unchanged workspaces.

File layout (draft_cache.json in the config directory):

{
    "version": 1,
    "entries": {
        "<fingerprint>": {
            "title": "...",
            "description": "...",
            "suggested_type": "feature",
            "suggested_slug": "...",
            "created_at": 1760000000.0
        }
    }
}

Deleting the file is always safe; it only forces regeneration.
"""

import json
import time
from pathlib import Path
from typing import Callable, Optional

from ugh.config import Settings, atomic_write_json, config_directory
from ugh.models import Draft

CACHE_FILENAME = "draft_cache.json"
CACHE_VERSION = 1
CACHE_LIMIT = 32


class DraftCache:
    """Fingerprint -> Draft store with an age limit.

    Every store() rewrites the whole file atomically, so two processes racing
    can lose one write but never corrupt the file.
    """

    def __init__(self, path: Path, max_age: Optional[float] = None,
                 clock: Callable[[], float] = time.time, limit: int = CACHE_LIMIT):
        self.path = path
        self.max_age = max_age
        self.clock = clock
        self.limit = limit
        self.warnings: list[str] = []

    @classmethod
    def for_settings(cls, settings: Settings, directory: Optional[Path] = None) -> 'DraftCache':
        directory = directory or config_directory()
        return cls(directory / CACHE_FILENAME, max_age=settings.cache_max_age_seconds)

    def _read_entries(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (ValueError, OSError) as e:
            self.warnings.append(f"Ignoring unreadable draft cache {self.path}: {e}")
            return {}
        entries = data.get('entries') if isinstance(data, dict) else None
        if not isinstance(entries, dict):
            self.warnings.append(f"Ignoring draft cache with unexpected layout: {self.path}")
            return {}
        return entries

    def is_fresh(self, created_at, now: float) -> bool:
        if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
            return False
        if self.max_age is None:
            return True
        return now - created_at <= self.max_age

    def lookup(self, fingerprint: str) -> Optional[Draft]:
        """Cached draft for this exact fingerprint, or None if absent or stale."""
        entry = self._read_entries().get(fingerprint)
        if not isinstance(entry, dict):
            return None
        if not self.is_fresh(entry.get('created_at'), self.clock()):
            return None
        try:
            return Draft.from_dict(entry)
        except ValueError:
            return None

    def store(self, fingerprint: str, draft: Draft) -> None:
        """Persist the draft, replacing any entry with the same fingerprint.

        Raises OSError when the file cannot be written.
        """
        entries = self._read_entries()
        entries.pop(fingerprint, None)
        entries[fingerprint] = {**draft.to_dict(), 'created_at': self.clock()}

        if len(entries) > self.limit:
            def age_key(item):
                created = item[1].get('created_at') if isinstance(item[1], dict) else None
                return created if isinstance(created, (int, float)) else float('-inf')
            ordered = sorted(entries.items(), key=age_key)
            entries = dict(ordered[len(ordered) - self.limit:])

        atomic_write_json(self.path, {'version': CACHE_VERSION, 'entries': entries})

    def clear(self) -> bool:
        """Delete the cache file. Returns False if there was nothing to delete."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
