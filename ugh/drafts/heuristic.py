"""Heuristic Draft Builder - Offline fallback that never fails."""

import re

from ugh.git.analyzer import ChangeKind, FileChange
from ugh.git.summarizer import ChangeSummary
from ugh.models import Draft, clamp_title, sanitize_slug

KIND_VERBS = {
    ChangeKind.ADDED: "Add",
    ChangeKind.MODIFIED: "Update",
    ChangeKind.DELETED: "Remove",
    ChangeKind.RENAMED: "Rename",
}

MAX_LISTED_FILES = 20


class HeuristicDraftBuilder:
    """Builds a structurally valid draft from file names alone."""

    FIX_PATTERN = re.compile(r'fix|bug|hotfix|patch|regression', re.IGNORECASE)

    def build(self, summary: ChangeSummary) -> Draft:
        files = list(summary.files)
        title = self._title(files)
        return Draft(
            title=title,
            description=self._description(summary),
            suggested_type='fix' if self._looks_like_fix(files) else 'feature',
            suggested_slug=sanitize_slug(title),
        )

    def _most_changed(self, files: list[FileChange]) -> FileChange:
        best = files[0]
        for f in files[1:]:
            if f.total_changes > best.total_changes:
                best = f
        return best

    def _title(self, files: list[FileChange]) -> str:
        if not files:
            return "Update workspace"
        top = self._most_changed(files)
        if len(files) == 1:
            return clamp_title(f"{KIND_VERBS[top.kind]} {top.name}")

        kinds = {f.kind for f in files}
        verb = KIND_VERBS[kinds.pop()] if len(kinds) == 1 else "Update"
        return clamp_title(f"{verb} {len(files)} files including {top.name}")

    def _looks_like_fix(self, files: list[FileChange]) -> bool:
        return any(self.FIX_PATTERN.search(f.path) for f in files)

    def _description(self, summary: ChangeSummary) -> str:
        lines = [
            f"Uncommitted changes across {summary.total_files} file(s) "
            f"(+{summary.total_additions} -{summary.total_deletions}):",
            "",
        ]
        for f in summary.files[:MAX_LISTED_FILES]:
            entry = f"- {f.path} ({f.kind.value}, +{f.additions} -{f.deletions})"
            if f.old_path:
                entry += f", renamed from {f.old_path}"
            lines.append(entry)
        remaining = summary.total_files - MAX_LISTED_FILES
        if remaining > 0:
            lines.append(f"- ... and {remaining} more files")
        return "\n".join(lines)
