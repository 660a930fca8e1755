"""Ticket Workflow - changes -> draft -> ticket -> branch.

Steps run in strict order and the first failure stops the run. Draft
generation absorbs LLM provider failures; any other UghError, in any step,
is wrapped in a WorkflowError naming the step that failed. There is no rollback: if checkout
fails after the ticket was filed, the ticket stays and the error says so.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from ugh.config import Settings
from ugh.drafts import DraftGenerator, GeneratedDraft
from ugh.errors import GitError, MissingBoardKey, UghError
from ugh.git import BranchNamer, ChangeSummarizer, ChangeSummary
from ugh.models import TicketRef
from ugh.tracker import IssueTrackerProvider

STEP_RESOLVE_BOARD = "resolve-board"
STEP_SUMMARIZE = "summarize"
STEP_DRAFT = "draft"
STEP_CREATE_TICKET = "create-ticket"
STEP_CHECKOUT = "checkout"


class WorkflowError(UghError):
    """A step failed. Carries the step name and the original error."""

    def __init__(self, step: str, cause: Exception, ticket: Optional[TicketRef] = None,
                 branch: Optional[str] = None):
        super().__init__(str(cause))
        self.step = step
        self.cause = cause
        self.ticket = ticket
        self.branch = branch

    def user_message(self) -> str:
        if self.step == STEP_CHECKOUT and self.ticket is not None:
            lines = [
                f"Ticket {self.ticket.key} created, but checkout failed:",
                f"  {self.cause}",
                f"Check out the branch manually: git checkout -b {self.branch}",
                f"Ticket: {self.ticket.url}",
            ]
            return "\n".join(lines)
        if self.step == STEP_CREATE_TICKET:
            return f"Ticket creation failed: {self.cause}"
        if self.step == STEP_SUMMARIZE and not isinstance(self.cause, GitError):
            return str(self.cause)
        if self.step == STEP_RESOLVE_BOARD:
            return str(self.cause)
        return f"{self.step} failed: {self.cause}"


@dataclass
class TicketOutcome:
    summary: ChangeSummary
    generated: GeneratedDraft
    ticket: TicketRef
    branch: str
    timings: dict = field(default_factory=dict)


def resolve_board(board_override: Optional[str], settings: Settings) -> str:
    """--board wins over default_project_key."""
    board = (board_override or settings.default_project_key or "").strip()
    if not board:
        raise MissingBoardKey()
    return board.upper()


class TicketWorkflow:
    """Composes summarizer, generator, tracker and branch namer."""

    def __init__(self, settings: Settings, workspace, generator: DraftGenerator,
                 tracker: IssueTrackerProvider, summarizer: Optional[ChangeSummarizer] = None,
                 namer: Optional[BranchNamer] = None):
        self.settings = settings
        self.workspace = workspace
        self.generator = generator
        self.tracker = tracker
        self.summarizer = summarizer or ChangeSummarizer()
        self.namer = namer or BranchNamer()

    def run(self, board_override: Optional[str] = None, hint: Optional[str] = None,
            use_cache: bool = True, on_step=None) -> TicketOutcome:
        """Run every step. Raises WorkflowError on the first fatal failure."""
        timings = {}

        def step(name):
            if on_step is not None:
                on_step(name)
            return time.time()

        step(STEP_RESOLVE_BOARD)
        try:
            board = resolve_board(board_override, self.settings)
        except UghError as e:
            raise WorkflowError(STEP_RESOLVE_BOARD, e)

        t0 = step(STEP_SUMMARIZE)
        try:
            summary = self.summarizer.summarize(self.workspace)
        except UghError as e:
            raise WorkflowError(STEP_SUMMARIZE, e)
        timings[STEP_SUMMARIZE] = time.time() - t0

        t0 = step(STEP_DRAFT)
        try:
            generated = self.generator.generate(summary, self.settings, hint=hint, use_cache=use_cache)
        except UghError as e:
            raise WorkflowError(STEP_DRAFT, e)
        timings[STEP_DRAFT] = time.time() - t0

        t0 = step(STEP_CREATE_TICKET)
        try:
            ticket = self.tracker.create_ticket(generated.draft, board, self.settings)
        except UghError as e:
            raise WorkflowError(STEP_CREATE_TICKET, e)
        timings[STEP_CREATE_TICKET] = time.time() - t0

        branch = self.namer.name_for(ticket, generated.draft)
        t0 = step(STEP_CHECKOUT)
        try:
            self.namer.checkout(branch, self.workspace)
        except UghError as e:
            raise WorkflowError(STEP_CHECKOUT, e, ticket=ticket, branch=branch)
        timings[STEP_CHECKOUT] = time.time() - t0

        return TicketOutcome(summary=summary, generated=generated, ticket=ticket,
                             branch=branch, timings=timings)
