"""Git Repository - Read uncommitted changes and create branches."""

import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from ugh.errors import GitError


class ChangeKind(str, Enum):
    ADDED = 'added'
    MODIFIED = 'modified'
    DELETED = 'deleted'
    RENAMED = 'renamed'


@dataclass(frozen=True)
class FileChange:
    """Represents a single file's uncommitted changes."""
    path: str
    kind: ChangeKind = ChangeKind.MODIFIED
    additions: int = 0
    deletions: int = 0
    old_path: Optional[str] = None

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions

    @property
    def name(self) -> str:
        return Path(self.path).name


@dataclass
class WorkspaceChanges:
    """Raw picture of the working tree: status records plus diff text."""
    files: list[FileChange] = field(default_factory=list)
    diff: str = ""

    @property
    def is_empty(self) -> bool:
        return len(self.files) == 0


def parse_status(output: str) -> list[tuple[ChangeKind, str, Optional[str]]]:
    """Parse 'git status --porcelain -z' into (kind, path, old_path) entries."""
    entries = []
    tokens = output.split('\0')
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 4:
            continue
        code, path = token[:2], token[3:]
        old_path = None
        if 'R' in code or 'C' in code:
            # -z puts the source path in the next field
            old_path = tokens[i] if i < len(tokens) else None
            i += 1
        entries.append((_kind_for(code), path, old_path))
    return entries


def _kind_for(code: str) -> ChangeKind:
    if code == '??':
        return ChangeKind.ADDED
    if 'R' in code:
        return ChangeKind.RENAMED
    if 'D' in code:
        return ChangeKind.DELETED
    if 'A' in code or 'C' in code:
        return ChangeKind.ADDED
    return ChangeKind.MODIFIED


def parse_numstat(output: str) -> dict[str, tuple[int, int]]:
    """Parse 'git diff --numstat' output into {path: (additions, deletions)}."""
    counts = {}
    for line in output.strip().split('\n'):
        parts = line.split('\t')
        if len(parts) < 3:
            continue
        additions = int(parts[0]) if parts[0].isdigit() else 0
        deletions = int(parts[1]) if parts[1].isdigit() else 0
        prev = counts.get(parts[2], (0, 0))
        counts[parts[2]] = (prev[0] + additions, prev[1] + deletions)
    return counts


class GitRepository:
    """Git collaborator for one working tree."""

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str, ok_codes: tuple[int, ...] = (0,)) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace'
            )
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")
        if result.returncode not in ok_codes:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{result.stderr.strip()}")
        return result.stdout

    def _verify_git_available(self) -> None:
        self._run_git('--version')

    def _verify_in_repo(self) -> None:
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def has_head(self) -> bool:
        """False in a repository with no commits yet."""
        out = self._run_git('rev-parse', '--verify', '--quiet', 'HEAD', ok_codes=(0, 1))
        return bool(out.strip())

    def current_diff_summary(self) -> WorkspaceChanges:
        """Staged, unstaged and untracked changes relative to HEAD."""
        status = parse_status(self._run_git('status', '--porcelain', '-z', '--untracked-files=all'))
        if not status:
            return WorkspaceChanges()

        if self.has_head():
            counts = parse_numstat(self._run_git('diff', 'HEAD', '--numstat', '--no-renames'))
            diff = self._run_git('diff', 'HEAD')
        else:
            counts = parse_numstat(
                self._run_git('diff', '--cached', '--numstat', '--no-renames')
                + self._run_git('diff', '--numstat', '--no-renames')
            )
            diff = self._run_git('diff', '--cached') + self._run_git('diff')

        files = []
        untracked_diffs = []
        for kind, path, old_path in status:
            additions, deletions = counts.get(path, (0, 0))
            if path not in counts and kind == ChangeKind.ADDED:
                untracked = self._untracked_diff(path)
                if untracked:
                    untracked_diffs.append(untracked)
                    additions = sum(1 for line in untracked.split('\n')
                                    if line.startswith('+') and not line.startswith('+++'))
            files.append(FileChange(path=path, kind=kind, additions=additions,
                                    deletions=deletions, old_path=old_path))

        if untracked_diffs:
            diff = diff + ''.join(untracked_diffs)
        return WorkspaceChanges(files=files, diff=diff)

    def _untracked_diff(self, path: str) -> str:
        """Diff for a file git does not track yet (exit code 1 means 'differs')."""
        try:
            return self._run_git('diff', '--no-index', '--', '/dev/null', path, ok_codes=(0, 1))
        except GitError:
            return ""

    def checkout_new_branch(self, name: str) -> None:
        """Create and switch to a new branch. Fails if it already exists."""
        self._run_git('checkout', '-b', name)
