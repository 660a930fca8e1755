"""
Tests for the command line surface: argument parsing, the ticket command,
config show/init and cache clear.

Run with:
    pytest tests/test_cli.py -v
    pytest tests/test_cli.py -v -s   # see actual terminal output
"""

import re

import pytest

from ugh.cli.args import parse_args
from ugh.cli.commands import run_setup
from ugh.cli.main import _report_outcome, main, run_ticket
from ugh.config import Settings, SettingsManager
from ugh.drafts import CACHE_FILENAME, DraftGenerator, GeneratedDraft
from ugh.errors import GitError
from ugh.git.analyzer import ChangeKind
from ugh.llm import NetworkError
from ugh.models import Provenance, TicketRef
from ugh.output import Spinner, colorize_branch, paint, print_error, print_warning
from ugh.tracker import TrackerValidationError
from ugh.workflow import TicketOutcome, TicketWorkflow

from conftest import FakeProvider, FakeTracker, FakeWorkspace

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub('', text)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def manager(tmp_path, settings):
    manager = SettingsManager(tmp_path)
    manager.save(settings)
    return manager


@pytest.fixture
def make_factory(sample_changes, checkout_draft):
    """Return a workflow factory wired to fakes, plus the fakes themselves."""
    def _make(provider=None, tracker=None, workspace=None):
        fakes = {
            "provider": provider or FakeProvider(draft=checkout_draft),
            "tracker": tracker or FakeTracker(),
            "workspace": workspace or FakeWorkspace(sample_changes),
            "calls": 0,
        }

        def factory(settings, manager):
            fakes["calls"] += 1
            generator = DraftGenerator(fakes["provider"])
            return TicketWorkflow(settings, fakes["workspace"], generator, fakes["tracker"])

        return factory, fakes
    return _make


@pytest.fixture
def answers(monkeypatch):
    """Feed the setup wizard: plain answers go to input(), secrets to getpass()."""
    def _feed(plain, secret):
        plain_iter = iter(plain)
        secret_iter = iter(secret)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(plain_iter))
        monkeypatch.setattr("getpass.getpass", lambda prompt="": next(secret_iter))
    return _feed


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

class TestParseArgs:

    def test_ticket_flags(self):
        args = parse_args(["ticket", "-b", "ops", "--hint", "login bug", "--no-cache", "--verbose"])
        assert args.command == "ticket"
        assert args.board == "ops"
        assert args.hint == "login bug"
        assert args.no_cache is True
        assert args.verbose is True

    def test_ticket_defaults(self):
        args = parse_args(["ticket"])
        assert args.board is None
        assert args.hint is None
        assert args.no_cache is False
        assert args.verbose is False

    def test_config_and_cache_actions(self):
        assert parse_args(["config", "show"]).config_command == "show"
        assert parse_args(["config", "init"]).config_command == "init"
        assert parse_args(["cache", "clear"]).cache_command == "clear"

    @pytest.mark.parametrize("argv", [[], ["config"], ["cache"], ["bogus"]])
    def test_usage_errors_exit_2(self, argv):
        with pytest.raises(SystemExit) as exc:
            main(argv)
        assert exc.value.code == 2


# ---------------------------------------------------------------------------
# ticket command
# ---------------------------------------------------------------------------

class TestRunTicket:

    def test_success(self, manager, make_factory, capsys):
        factory, fakes = make_factory()
        code = run_ticket(parse_args(["ticket"]), manager, workflow_factory=factory)

        out = strip_ansi(capsys.readouterr().out)
        assert code == 0
        assert "Ticket DEMO-123 created (generated draft)" in out
        assert "Update checkout flow" in out
        assert "https://jira.example.com/browse/DEMO-123" in out
        assert "feature/DEMO-123/update-checkout-flow" in out
        assert fakes["workspace"].checked_out == ["feature/DEMO-123/update-checkout-flow"]

    def test_board_and_hint_are_passed(self, manager, make_factory):
        factory, fakes = make_factory(tracker=FakeTracker(key="OPS-4"))
        run_ticket(parse_args(["ticket", "--board", "ops", "--hint", "q3"]), manager, workflow_factory=factory)
        assert fakes["tracker"].calls[0][1] == "OPS"

    def test_incomplete_config_is_not_prompted_without_tty(self, tmp_path, make_factory, capsys):
        factory, fakes = make_factory()
        code = run_ticket(parse_args(["ticket"]), SettingsManager(tmp_path), workflow_factory=factory)

        err = strip_ansi(capsys.readouterr().err)
        assert code == 1
        assert "Configuration incomplete" in err
        assert "Jira base URL" in err
        assert fakes["calls"] == 0

    def test_board_flag_covers_missing_project_key(self, tmp_path, settings, make_factory):
        manager = SettingsManager(tmp_path)
        manager.save(Settings(**{k: v for k, v in settings.to_dict().items() if k != "default_project_key"}))
        factory, _ = make_factory()
        assert run_ticket(parse_args(["ticket", "-b", "DEMO"]), manager, workflow_factory=factory) == 0

    def test_env_overrides_fill_missing_settings(self, tmp_path, monkeypatch, make_factory):
        monkeypatch.setenv("UGH_JIRA_BASE_URL", "https://jira.example.com")
        monkeypatch.setenv("UGH_JIRA_EMAIL", "dev@example.com")
        monkeypatch.setenv("UGH_JIRA_TOKEN", "token")
        monkeypatch.setenv("UGH_DEFAULT_PROJECT_KEY", "DEMO")
        factory, _ = make_factory()
        assert run_ticket(parse_args(["ticket"]), SettingsManager(tmp_path), workflow_factory=factory) == 0

    def test_missing_llm_key_warns(self, tmp_path, settings, make_factory, capsys):
        manager = SettingsManager(tmp_path)
        manager.save(Settings(**{k: v for k, v in settings.to_dict().items() if k != "llm_api_key"}))
        factory, _ = make_factory()

        assert run_ticket(parse_args(["ticket"]), manager, workflow_factory=factory) == 0
        assert "No LLM API key configured" in capsys.readouterr().err

    def test_offline_draft_is_reported(self, manager, make_factory, capsys):
        factory, _ = make_factory(provider=FakeProvider(error=NetworkError("offline")))
        code = run_ticket(parse_args(["ticket"]), manager, workflow_factory=factory)

        captured = capsys.readouterr()
        assert code == 0
        assert "used offline draft" in strip_ansi(captured.err)
        assert "offline draft (LLM unavailable)" in strip_ansi(captured.out)

    def test_verbose_stats_go_to_stderr(self, manager, make_factory, capsys):
        factory, _ = make_factory()
        run_ticket(parse_args(["ticket", "--verbose"]), manager, workflow_factory=factory)

        captured = capsys.readouterr()
        err = strip_ansi(captured.err)
        assert "Fingerprint:" in err
        assert "Provenance: generated" in err
        assert "States: cache-check -> cache-miss" in err
        assert "Fingerprint:" not in captured.out

    def test_tracker_failure_exits_1(self, manager, make_factory, capsys):
        tracker = FakeTracker(error=TrackerValidationError("issuetype: invalid"))
        factory, fakes = make_factory(tracker=tracker)
        code = run_ticket(parse_args(["ticket"]), manager, workflow_factory=factory)

        assert code == 1
        assert "Ticket creation failed: issuetype: invalid" in strip_ansi(capsys.readouterr().err)
        assert fakes["workspace"].checked_out == []

    def test_checkout_failure_exits_1_with_ticket(self, manager, sample_changes, make_factory, capsys):
        workspace = FakeWorkspace(sample_changes, checkout_error=GitError("already exists"))
        factory, _ = make_factory(workspace=workspace)
        code = run_ticket(parse_args(["ticket"]), manager, workflow_factory=factory)

        err = strip_ansi(capsys.readouterr().err)
        assert code == 1
        assert "Ticket DEMO-123 created, but checkout failed" in err
        assert "https://jira.example.com/browse/DEMO-123" in err

    def test_factory_failure_exits_1(self, manager, capsys):
        def factory(settings, manager):
            raise GitError("Not inside a git repository")

        assert run_ticket(parse_args(["ticket"]), manager, workflow_factory=factory) == 1
        assert "Not inside a git repository" in capsys.readouterr().err


class TestReportOutcome:

    def test_cached_label_and_warnings(self, make_summary, checkout_draft, capsys):
        outcome = TicketOutcome(
            summary=make_summary([("src/a.py", ChangeKind.MODIFIED, 1, 1)]),
            generated=GeneratedDraft(checkout_draft, Provenance.CACHED, warnings=("Could not save draft cache: x",)),
            ticket=TicketRef(key="DEMO-1", url="https://jira.example.com/browse/DEMO-1"),
            branch="feature/DEMO-1/update-checkout-flow",
        )
        _report_outcome(outcome, verbose=False)

        captured = capsys.readouterr()
        assert "Ticket DEMO-1 created (reused cached draft)" in strip_ansi(captured.out)
        assert "Could not save draft cache" in captured.err


# ---------------------------------------------------------------------------
# config / cache commands
# ---------------------------------------------------------------------------

class TestConfigShow:

    def test_secrets_are_masked(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("UGH_CONFIG_DIR", str(tmp_path))
        SettingsManager(tmp_path).save(Settings(
            jira_base_url="https://jira.example.com",
            jira_token="super-secret-token",
        ))

        assert main(["config", "show"]) == 0
        out = strip_ansi(capsys.readouterr().out)
        assert "sup***ken" in out
        assert "super-secret-token" not in out
        assert "https://jira.example.com" in out
        assert "llm_api_key:" in out

    def test_lists_env_overrides(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("UGH_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("UGH_DEFAULT_PROJECT_KEY", "OPS")

        main(["config", "show"])
        out = strip_ansi(capsys.readouterr().out)
        assert "UGH_DEFAULT_PROJECT_KEY" in out
        assert "defaults (no config.json found)" in out


class TestConfigInit:

    def test_fresh_setup(self, tmp_path, answers):
        answers(
            plain=["https://jira.example.com", "dev@example.com", "DEMO", "", "", ""],
            secret=["token-123", "sk-abc"],
        )
        manager = SettingsManager(tmp_path)
        assert run_setup(manager) == 0

        stored = manager.load_stored()
        assert stored.jira_base_url == "https://jira.example.com"
        assert stored.jira_token == "token-123"
        assert stored.default_project_key == "DEMO"
        assert stored.default_issue_type == "Task"
        assert stored.llm_api_key == "sk-abc"
        assert stored.llm_model is None

    def test_enter_keeps_and_dash_clears(self, manager, settings, answers):
        answers(plain=["", "-", "", "-", "", ""], secret=["", "-"])
        assert run_setup(manager) == 0

        stored = manager.load_stored()
        assert stored.jira_base_url == settings.jira_base_url
        assert stored.jira_token == settings.jira_token
        assert stored.jira_email is None
        assert stored.default_issue_type == "Task"
        assert stored.llm_api_key is None

    def test_cancel_saves_nothing(self, tmp_path, monkeypatch):
        def cancel(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", cancel)
        manager = SettingsManager(tmp_path)
        assert run_setup(manager) == 1
        assert not manager.path.exists()

    def test_invalid_provider_is_corrected(self, tmp_path, answers, capsys):
        answers(plain=["", "", "", "", "openai", ""], secret=["", ""])
        manager = SettingsManager(tmp_path)
        assert run_setup(manager) == 0

        assert manager.load_stored().llm_provider == "claude"
        assert "Invalid llm_provider" in capsys.readouterr().err


class TestCacheClear:

    def test_removes_cache_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("UGH_CONFIG_DIR", str(tmp_path))
        cache_file = tmp_path / CACHE_FILENAME
        cache_file.write_text('{"version": 1, "entries": {}}')

        assert main(["cache", "clear"]) == 0
        assert not cache_file.exists()
        assert "Removed" in strip_ansi(capsys.readouterr().out)

    def test_nothing_to_clear(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("UGH_CONFIG_DIR", str(tmp_path))
        assert main(["cache", "clear"]) == 0
        assert "No draft cache" in strip_ansi(capsys.readouterr().out)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

class TestOutput:

    def test_no_color_disables_styles(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert paint("x", "red") == "x"
        assert colorize_branch("fix/DEMO-1/crash") == "fix/DEMO-1/crash"

    def test_force_color_colors_branch_type(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("FORCE_COLOR", "1")
        colored = colorize_branch("fix/DEMO-1/crash")
        assert colored != "fix/DEMO-1/crash"
        assert strip_ansi(colored) == "fix/DEMO-1/crash"

    def test_unknown_branch_type_left_alone(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert colorize_branch("main") == "main"

    def test_errors_and_warnings_use_stderr(self, capsys):
        print_error("boom")
        print_warning("careful")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "boom" in captured.err
        assert "careful" in captured.err

    def test_spinner_is_silent_off_terminal(self, capsys):
        with Spinner("draft...") as spinner:
            spinner.label = "checkout..."
        assert not spinner.active
        assert capsys.readouterr().err == ""
