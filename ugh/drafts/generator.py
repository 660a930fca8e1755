"""Draft Generator - Cache, then LLM, then heuristic.

    CACHE_CHECK -> CACHE_HIT -> DONE
    CACHE_CHECK -> CACHE_MISS -> LLM_ATTEMPT -> LLM_SUCCESS -> STORE -> DONE
                                 LLM_ATTEMPT -> LLM_FAILURE -> HEURISTIC_FALLBACK -> DONE

The LLM is called at most once per run. Heuristic drafts are never cached,
so the next run with the same fingerprint tries the LLM again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ugh.config import Settings
from ugh.drafts.cache import DraftCache
from ugh.drafts.heuristic import HeuristicDraftBuilder
from ugh.git.summarizer import ChangeSummary
from ugh.llm.base import LLMError, LLMProvider
from ugh.models import Draft, Provenance


class DraftState(str, Enum):
    CACHE_CHECK = 'cache-check'
    CACHE_HIT = 'cache-hit'
    CACHE_MISS = 'cache-miss'
    LLM_ATTEMPT = 'llm-attempt'
    LLM_SUCCESS = 'llm-success'
    LLM_FAILURE = 'llm-failure'
    STORE = 'store'
    HEURISTIC_FALLBACK = 'heuristic-fallback'
    DONE = 'done'


@dataclass(frozen=True)
class LlmOutcome:
    """Tagged result of one LLM attempt: a draft or a failure kind."""
    draft: Optional[Draft] = None
    failure: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.draft is not None


@dataclass(frozen=True)
class GeneratedDraft:
    """A draft plus where it came from."""
    draft: Draft
    provenance: Provenance
    fallback_reason: Optional[str] = None
    warnings: tuple[str, ...] = ()
    trace: tuple[DraftState, ...] = ()


class DraftGenerator:
    """Produces exactly one draft per call and never raises provider errors."""

    def __init__(self, provider: LLMProvider, cache: Optional[DraftCache] = None,
                 heuristic: Optional[HeuristicDraftBuilder] = None):
        self.provider = provider
        self.cache = cache
        self.heuristic = heuristic or HeuristicDraftBuilder()

    def attempt_llm(self, summary: ChangeSummary, settings: Settings, hint: Optional[str] = None) -> LlmOutcome:
        try:
            draft = self.provider.generate_draft(summary, settings, hint)
        except LLMError as e:
            return LlmOutcome(failure=e.kind, message=str(e))
        return LlmOutcome(draft=draft)

    def generate(self, summary: ChangeSummary, settings: Settings,
                 hint: Optional[str] = None, use_cache: bool = True) -> GeneratedDraft:
        trace = []
        warnings = []
        state = DraftState.CACHE_CHECK
        result = None
        outcome = None

        while state != DraftState.DONE:
            trace.append(state)

            if state == DraftState.CACHE_CHECK:
                cached = None
                if use_cache and self.cache is not None:
                    cached = self.cache.lookup(summary.fingerprint)
                if cached is not None:
                    result = GeneratedDraft(cached, Provenance.CACHED)
                    state = DraftState.CACHE_HIT
                else:
                    state = DraftState.CACHE_MISS

            elif state == DraftState.CACHE_HIT:
                state = DraftState.DONE

            elif state == DraftState.CACHE_MISS:
                state = DraftState.LLM_ATTEMPT

            elif state == DraftState.LLM_ATTEMPT:
                outcome = self.attempt_llm(summary, settings, hint)
                state = DraftState.LLM_SUCCESS if outcome.ok else DraftState.LLM_FAILURE

            elif state == DraftState.LLM_SUCCESS:
                result = GeneratedDraft(outcome.draft, Provenance.GENERATED)
                state = DraftState.STORE

            elif state == DraftState.STORE:
                if self.cache is not None:
                    try:
                        self.cache.store(summary.fingerprint, outcome.draft)
                    except OSError as e:
                        warnings.append(f"Could not save draft cache: {e}")
                state = DraftState.DONE

            elif state == DraftState.LLM_FAILURE:
                state = DraftState.HEURISTIC_FALLBACK

            elif state == DraftState.HEURISTIC_FALLBACK:
                result = GeneratedDraft(
                    self.heuristic.build(summary),
                    Provenance.HEURISTIC,
                    fallback_reason=f"{outcome.failure}: {outcome.message}",
                )
                state = DraftState.DONE

        trace.append(DraftState.DONE)
        if self.cache is not None:
            warnings = self.cache.warnings + warnings
            self.cache.warnings = []

        return GeneratedDraft(
            draft=result.draft,
            provenance=result.provenance,
            fallback_reason=result.fallback_reason,
            warnings=tuple(warnings),
            trace=tuple(trace),
        )
