"""CLI Main Entry Point"""

import sys

from ugh.config import Settings, SettingsManager
from ugh.drafts import DraftCache, DraftGenerator
from ugh.errors import ConfigError, GitError
from ugh.git import GitRepository
from ugh.llm import get_provider
from ugh.output import (
    ARROW, PROVENANCE_LABELS, Spinner, bold, colorize_branch, dim, info,
    print_detail, print_error, print_success, print_warning,
)
from ugh.tracker import get_tracker
from ugh.workflow import TicketOutcome, TicketWorkflow, WorkflowError

from ugh.cli.args import parse_args
from ugh.cli.commands import clear_cache, display_config, run_setup


def _load_settings(manager: SettingsManager, board: str | None, interactive: bool) -> Settings | None:
    """Load settings, running the wizard once if ticket settings are missing.

    Returns None when required settings are still missing.
    """
    settings = manager.load()
    for message in manager.warnings:
        print_warning(message)

    missing = settings.missing_for_ticket(board)
    if not missing:
        return settings

    if not interactive:
        print_error(f"Configuration incomplete ({', '.join(missing)}). Run: ugh config init")
        return None

    print_warning(f"Configuration incomplete ({', '.join(missing)}). Launching setup...")
    if run_setup(manager) != 0:
        return None

    settings = manager.load()
    missing = settings.missing_for_ticket(board)
    if missing:
        print_error(
            f"Required settings still missing after setup ({', '.join(missing)}). "
            "Re-run `ugh config init` or set the UGH_* environment variables."
        )
        return None
    return settings


def _build_workflow(settings: Settings, manager: SettingsManager) -> TicketWorkflow:
    """Wire the concrete git, LLM, cache and tracker implementations."""
    workspace = GitRepository()
    generator = DraftGenerator(
        provider=get_provider(settings),
        cache=DraftCache.for_settings(settings, manager.directory),
    )
    return TicketWorkflow(settings, workspace, generator, get_tracker(settings))


def _print_verbose_stats(outcome: TicketOutcome):
    """Print fingerprint, provenance and timings to stderr."""
    generated = outcome.generated
    summary = outcome.summary
    print_detail(f"Fingerprint: {summary.fingerprint}")
    print_detail(f"Files: {summary.total_files} (+{summary.total_additions} -{summary.total_deletions})"
                 f"{' [diff truncated]' if summary.truncated else ''}")
    print_detail(f"Provenance: {generated.provenance.value}")
    if generated.fallback_reason:
        print_detail(f"Fallback reason: {generated.fallback_reason}")
    print_detail(f"States: {' -> '.join(s.value for s in generated.trace)}")
    timings = ", ".join(f"{name}={seconds:.2f}s" for name, seconds in outcome.timings.items())
    print_detail(f"Timings: {timings}")


def _report_outcome(outcome: TicketOutcome, verbose: bool) -> None:
    generated = outcome.generated
    for message in generated.warnings:
        print_warning(message)
    if generated.fallback_reason and not verbose:
        print_warning(f"LLM draft unavailable ({generated.fallback_reason}); used offline draft.")
    if verbose:
        _print_verbose_stats(outcome)

    label = PROVENANCE_LABELS.get(generated.provenance.value, generated.provenance.value)
    print_success(f"Ticket {bold(outcome.ticket.key)} created {dim('(' + label + ')')}")
    print(f"  {dim('Title:')}  {generated.draft.title}")
    print(f"  {dim('URL:')}    {info(outcome.ticket.url)}")
    print(f"  {dim('Branch:')} {ARROW} {colorize_branch(outcome.branch)}")


def run_ticket(args, manager: SettingsManager | None = None, workflow_factory=_build_workflow) -> int:
    """Main ticket flow.

    Returns:
        int: Exit code
    """
    manager = manager or SettingsManager()
    is_pipe = not sys.stdout.isatty()
    interactive = sys.stdin.isatty() and not is_pipe

    settings = _load_settings(manager, args.board, interactive)
    if settings is None:
        return 1

    if not settings.llm_api_key:
        print_warning("No LLM API key configured; the ticket will use an offline draft.")

    try:
        workflow = workflow_factory(settings, manager)
    except (GitError, ConfigError) as e:
        print_error(str(e))
        return 1

    try:
        with Spinner() as spinner:
            outcome = workflow.run(
                board_override=args.board,
                hint=args.hint,
                use_cache=not args.no_cache,
                on_step=lambda step: setattr(spinner, 'label', f"{step}..."),
            )
    except WorkflowError as e:
        print_error(e.user_message())
        return 1

    _report_outcome(outcome, args.verbose)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    manager = SettingsManager()

    if args.command == 'config':
        if args.config_command == 'init':
            return run_setup(manager)
        return display_config(manager)

    if args.command == 'cache':
        return clear_cache(manager)

    return run_ticket(args, manager)
