"""Draft Generation Package"""

from ugh.drafts.cache import DraftCache, CACHE_FILENAME, CACHE_LIMIT
from ugh.drafts.heuristic import HeuristicDraftBuilder
from ugh.drafts.generator import DraftGenerator, DraftState, GeneratedDraft, LlmOutcome

__all__ = [
    "DraftCache",
    "CACHE_FILENAME",
    "CACHE_LIMIT",
    "HeuristicDraftBuilder",
    "DraftGenerator",
    "DraftState",
    "GeneratedDraft",
    "LlmOutcome",
]
