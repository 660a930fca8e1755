"""Prompt Builder - Construct LLM prompts for ticket drafts."""

from dataclasses import dataclass

from ugh import BRANCH_TYPES
from ugh.git.summarizer import ChangeSummary
from ugh.models import MAX_SLUG_LENGTH, MAX_TITLE_LENGTH


@dataclass
class PromptConfig:
    """User-provided context that shapes the prompt."""
    hint: str | None = None
    max_title_length: int = MAX_TITLE_LENGTH
    max_slug_length: int = MAX_SLUG_LENGTH


class PromptBuilder:
    """Constructs prompts asking for a ticket draft as a JSON object."""

    def build(self, summary: ChangeSummary, config: PromptConfig | None = None) -> str:
        config = config or PromptConfig()
        sections = [
            self._build_role_section(),
            self._build_format_section(config),
            self._build_changes_section(summary),
            self._build_hints_section(config),
            self._build_final_instructions(),
        ]
        return "\n\n".join(filter(None, sections))

    def _build_role_section(self) -> str:
        return """You are a senior engineer filing a tracker ticket for work that already exists as uncommitted changes.

Core principles:
- The title says what the work delivers, in imperative mood ("Add", "Fix", "Extract")
- The description tells a reviewer what changed and why it matters
- Never invent changes that are not visible in the files or diff below"""

    def _build_format_section(self, config: PromptConfig) -> str:
        types_list = "\n".join(f"  - {t}: {desc}" for t, desc in BRANCH_TYPES.items())
        return f"""<format>
Respond with ONE JSON object and nothing else:

{{
  "title": "imperative summary, max {config.max_title_length} chars",
  "description": "2-5 sentences or '- ' bullets describing the change",
  "type": "one of the types below",
  "slug": "2-5 lowercase words joined by dashes, max {config.max_slug_length} chars"
}}

Choose the most appropriate type:
{types_list}
</format>"""

    def _build_changes_section(self, summary: ChangeSummary) -> str:
        parts = [
            "<changes>",
            f"FILES CHANGED: {summary.total_files} (+{summary.total_additions} -{summary.total_deletions})",
            "",
            summary.overview(),
        ]

        if summary.diff:
            parts.extend(["", "DIFF DETAILS:", summary.diff])

        if summary.truncated:
            parts.append("\n[Note: Diff was truncated due to size. Focus on the file summary above for scope.]")

        parts.append("</changes>")
        return "\n".join(parts)

    def _build_hints_section(self, config: PromptConfig) -> str:
        if not config.hint:
            return ""

        return f"""<context>
The developer provided this context about the changes:
"{config.hint}"

Use this to inform the ticket, but verify it matches what you see in the diff.
</context>"""

    def _build_final_instructions(self) -> str:
        return """<instructions>
Rules:
- Output only the JSON object
- No markdown code fences, no preamble, no explanation after it
- The slug must contain only a-z, 0-9 and single dashes
</instructions>"""
