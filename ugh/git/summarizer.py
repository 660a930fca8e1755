"""Change Summarizer - Turn workspace changes into a fingerprinted summary."""

import hashlib
import re
from dataclasses import dataclass
from enum import IntEnum

from ugh.errors import NoChangesFound
from ugh.git.analyzer import FileChange, WorkspaceChanges


class Priority(IntEnum):
    """File priority for inclusion in LLM context."""
    SOURCE = 1
    TEST = 2
    CONFIG = 3
    DOCS = 4
    NOISE = 99


PRIORITY_LABELS = {
    Priority.SOURCE: "Source",
    Priority.TEST: "Tests",
    Priority.CONFIG: "Config",
    Priority.DOCS: "Docs",
    Priority.NOISE: "Generated",
}


@dataclass(frozen=True)
class ChangeSummary:
    """Immutable description of one invocation's uncommitted work."""
    files: tuple[FileChange, ...]
    priorities: tuple[Priority, ...]
    diff: str
    fingerprint: str
    truncated: bool = False

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    @property
    def is_empty(self) -> bool:
        return len(self.files) == 0

    def overview(self) -> str:
        """Grouped file listing used in prompts and verbose output."""
        lines = ["FILES CHANGED:"]
        current = None
        for file, priority in zip(self.files, self.priorities):
            if priority != current:
                current = priority
                lines.append(f"\n[{PRIORITY_LABELS[priority]}]")
            entry = f"  {file.path} ({file.kind.value}, +{file.additions} -{file.deletions})"
            if file.old_path:
                entry += f" from {file.old_path}"
            lines.append(entry)
        return "\n".join(lines)


@dataclass
class SummarizerConfig:
    """Tunable settings for diff truncation."""
    max_tokens: int = 3000
    max_lines_per_file: int = 200


def compute_fingerprint(files: list[FileChange], raw_diff: str) -> str:
    """SHA-256 over the ordered file records and the full diff text."""
    hasher = hashlib.sha256()
    for f in files:
        record = f"{f.kind.value}\t{f.path}\t{f.old_path or ''}\t{f.additions}\t{f.deletions}\n"
        hasher.update(record.encode('utf-8'))
    hasher.update(b'\0')
    hasher.update(raw_diff.encode('utf-8'))
    return hasher.hexdigest()


class ChangeSummarizer:
    """Reads the workspace once and builds a ChangeSummary."""

    NOISE_PATTERNS: list[str] = [
        r'package-lock\.json$', r'yarn\.lock$', r'pnpm-lock\.yaml$',
        r'poetry\.lock$', r'Cargo\.lock$', r'Gemfile\.lock$', r'composer\.lock$', r'uv\.lock$',
        r'\.min\.js$', r'\.min\.css$', r'\.map$', r'\.pyc$', r'__pycache__',
        r'\.class$', r'dist/', r'build/', r'\.egg-info/',
        r'\.idea/', r'\.vscode/', r'\.DS_Store$',
        r'node_modules/', r'vendor/', r'venv/', r'\.venv/',
    ]

    TEST_PATTERNS: list[str] = [
        r'test[s]?/', r'spec[s]?/', r'__tests__/',
        r'\.test\.', r'\.spec\.', r'_test\.', r'_spec\.', r'(^|/)test_[^/]*$',
        r'Test\.java$', r'Tests\.java$',
    ]

    CONFIG_PATTERNS: list[str] = [
        r'\.json$', r'\.ya?ml$', r'\.toml$', r'\.ini$', r'\.cfg$', r'\.env',
        r'\.config\.', r'config/', r'settings/',
        r'Makefile$', r'Dockerfile$', r'docker-compose',
    ]

    DOCS_PATTERNS: list[str] = [
        r'\.md$', r'\.rst$', r'\.txt$', r'docs/',
        r'README', r'CHANGELOG', r'LICENSE',
    ]

    def __init__(self, config: SummarizerConfig | None = None):
        self.config = config or SummarizerConfig()
        self._noise_re = [re.compile(p, re.IGNORECASE) for p in self.NOISE_PATTERNS]
        self._test_re = [re.compile(p, re.IGNORECASE) for p in self.TEST_PATTERNS]
        self._config_re = [re.compile(p, re.IGNORECASE) for p in self.CONFIG_PATTERNS]
        self._docs_re = [re.compile(p, re.IGNORECASE) for p in self.DOCS_PATTERNS]

    def summarize(self, workspace) -> ChangeSummary:
        """Summarize a workspace exposing current_diff_summary().

        Raises NoChangesFound when nothing is staged, modified or untracked.
        """
        return self.from_changes(workspace.current_diff_summary())

    def from_changes(self, changes: WorkspaceChanges) -> ChangeSummary:
        if changes.is_empty:
            raise NoChangesFound()

        classified = [(f, self.get_priority(f.path)) for f in changes.files]
        classified.sort(key=lambda x: (x[1], -x[0].total_changes))

        diff, truncated = self._build_detailed_diff(classified, changes.diff)

        return ChangeSummary(
            files=tuple(f for f, _ in classified),
            priorities=tuple(p for _, p in classified),
            diff=diff,
            fingerprint=compute_fingerprint(changes.files, changes.diff),
            truncated=truncated,
        )

    def get_priority(self, path: str) -> Priority:
        if any(p.search(path) for p in self._noise_re):
            return Priority.NOISE
        if any(p.search(path) for p in self._test_re):
            return Priority.TEST
        if any(p.search(path) for p in self._docs_re):
            return Priority.DOCS
        if any(p.search(path) for p in self._config_re):
            return Priority.CONFIG
        return Priority.SOURCE

    def _build_detailed_diff(self, files: list[tuple[FileChange, Priority]], full_diff: str) -> tuple[str, bool]:
        if not full_diff:
            return "", False

        file_diffs = self._split_diff_by_file(full_diff)
        result_parts = []
        tokens_used = 0
        truncated = False

        for file, priority in files:
            if priority == Priority.NOISE or file.path not in file_diffs:
                continue

            file_diff, cut = self._truncate_file_diff(file_diffs[file.path], file.path)
            truncated = truncated or cut
            diff_tokens = len(file_diff) // 4

            if tokens_used + diff_tokens > self.config.max_tokens:
                truncated = True
                break

            result_parts.append(file_diff)
            tokens_used += diff_tokens

        return "\n".join(result_parts), truncated

    def _split_diff_by_file(self, diff: str) -> dict[str, str]:
        files = {}
        current_file = None
        current_lines = []

        for line in diff.split('\n'):
            if line.startswith('diff --git'):
                if current_file:
                    files[current_file] = '\n'.join(current_lines)
                current_file = None
                match = re.search(r'diff --git (?:a/.+?|/dev/null) b/(.+)$', line)
                if match:
                    current_file = match.group(1)
                    current_lines = [line]
            elif current_file:
                current_lines.append(line)

        if current_file:
            files[current_file] = '\n'.join(current_lines)

        return files

    def _truncate_file_diff(self, diff: str, path: str) -> tuple[str, bool]:
        lines = diff.split('\n')
        if len(lines) <= self.config.max_lines_per_file:
            return diff, False

        kept = lines[:self.config.max_lines_per_file]
        kept.append(f"... [{len(lines) - self.config.max_lines_per_file} more lines truncated from {path}]")
        return '\n'.join(kept), True
