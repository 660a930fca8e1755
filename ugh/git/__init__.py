"""Git Operations Package"""

from ugh.git.analyzer import GitRepository, FileChange, ChangeKind, WorkspaceChanges
from ugh.git.summarizer import ChangeSummarizer, ChangeSummary, SummarizerConfig, Priority
from ugh.git.branch import BranchNamer

__all__ = [
    "GitRepository",
    "FileChange",
    "ChangeKind",
    "WorkspaceChanges",
    "ChangeSummarizer",
    "ChangeSummary",
    "SummarizerConfig",
    "Priority",
    "BranchNamer",
]
