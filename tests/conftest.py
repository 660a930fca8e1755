"""Shared fixtures and fakes for the ticket pipeline tests."""

import dataclasses
import os

import pytest

from ugh.config import Settings
from ugh.errors import GitError
from ugh.git.analyzer import ChangeKind, FileChange, WorkspaceChanges
from ugh.git.summarizer import ChangeSummarizer
from ugh.llm.base import LLMProvider
from ugh.models import Draft, TicketRef
from ugh.tracker.base import IssueTrackerProvider


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's UGH_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("UGH_"):
            monkeypatch.delenv(name, raising=False)


class FakeWorkspace:
    """Stands in for GitRepository."""

    def __init__(self, changes=None, checkout_error=None):
        self.changes = changes if changes is not None else WorkspaceChanges()
        self.checkout_error = checkout_error
        self.summary_calls = 0
        self.checked_out = []

    def current_diff_summary(self):
        self.summary_calls += 1
        return self.changes

    def checkout_new_branch(self, name):
        if self.checkout_error is not None:
            raise self.checkout_error
        self.checked_out.append(name)


class FakeProvider(LLMProvider):
    """Returns a canned draft or raises a canned error."""

    name = "Fake"

    def __init__(self, draft=None, error=None):
        self.draft = draft
        self.error = error
        self.calls = 0

    def generate_draft(self, summary, settings, hint=None):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.draft


class FakeTracker(IssueTrackerProvider):
    """Records create_ticket calls."""

    name = "Fake"

    def __init__(self, key="DEMO-123", error=None):
        self.key = key
        self.error = error
        self.calls = []

    def create_ticket(self, draft, board_key, settings):
        self.calls.append((draft, board_key))
        if self.error is not None:
            raise self.error
        return TicketRef(key=self.key, url=f"https://jira.example.com/browse/{self.key}")


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


class FailingWorkspace(FakeWorkspace):
    def current_diff_summary(self):
        raise GitError("Not inside a git repository")


@pytest.fixture
def settings():
    return Settings(
        jira_base_url="https://jira.example.com",
        jira_email="dev@example.com",
        jira_token="token-123456",
        default_project_key="DEMO",
        llm_api_key="sk-test",
    )


@pytest.fixture
def checkout_draft():
    return Draft(
        title="Update checkout flow",
        description="Reworks the checkout flow.",
        suggested_type="feature",
        suggested_slug="update-checkout-flow",
    )


@pytest.fixture
def sample_changes():
    return WorkspaceChanges(
        files=[
            FileChange(path="src/checkout/flow.py", kind=ChangeKind.MODIFIED, additions=40, deletions=12),
            FileChange(path="tests/test_flow.py", kind=ChangeKind.ADDED, additions=25, deletions=0),
        ],
        diff=(
            "diff --git a/src/checkout/flow.py b/src/checkout/flow.py\n"
            "+def submit_order():\n"
            "diff --git a/tests/test_flow.py b/tests/test_flow.py\n"
            "+def test_submit_order():\n"
        ),
    )


@pytest.fixture
def make_summary():
    """Return a factory building a ChangeSummary from (path, kind, +, -) tuples."""
    def _make(files, diff="", fingerprint=None):
        changes = WorkspaceChanges(
            files=[FileChange(path=p, kind=k, additions=a, deletions=d) for p, k, a, d in files],
            diff=diff,
        )
        summary = ChangeSummarizer().from_changes(changes)
        if fingerprint is not None:
            summary = dataclasses.replace(summary, fingerprint=fingerprint)
        return summary
    return _make
