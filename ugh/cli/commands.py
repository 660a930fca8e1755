"""CLI Commands"""

import getpass
import os
from dataclasses import fields, replace

from ugh.config import SECRET_FIELDS, Settings, SettingsManager, mask_secret
from ugh.drafts import DraftCache
from ugh.errors import ConfigError
from ugh.output import bold, dim, info, print_error, print_success, print_warning

WIZARD_PROMPTS = [
    ("jira_base_url", "Jira base URL (e.g., https://company.atlassian.net)"),
    ("jira_email", "Jira email"),
    ("jira_token", "Jira API token"),
    ("default_project_key", "Default project key"),
    ("default_issue_type", "Default issue type"),
    ("llm_provider", "LLM provider (claude)"),
    ("llm_api_key", "LLM API key"),
    ("llm_model", "LLM model (Enter for provider default)"),
]


def display_config(manager: SettingsManager) -> int:
    """Display current settings with secrets masked."""
    settings = manager.load()
    stored = manager.load_stored()

    print(f"\n{bold('Current Configuration')}\n")
    if manager.path.exists():
        print(f"  {dim('Loaded from:')} {manager.path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no {manager.path.name} found)")

    overridden = [f.name for f in fields(Settings) if getattr(settings, f.name) != getattr(stored, f.name)]
    if overridden:
        print(f"  {dim('Environment overrides:')}")
        for name in overridden:
            print(f"    UGH_{name.upper()}")

    print()
    print(f"  {bold('Settings:')}")
    width = max(len(f.name) for f in fields(Settings)) + 1
    for f in fields(Settings):
        value = getattr(settings, f.name)
        if f.name in SECRET_FIELDS:
            shown = mask_secret(value)
        else:
            shown = "<not set>" if value is None else str(value)
        print(f"    {(f.name + ':').ljust(width)} {info(shown)}")

    for message in manager.warnings:
        print_warning(message)

    print(f"\n  {dim('Run')} ugh config init {dim('to configure')}\n")
    return 0


def _prompt(label: str, current, secret: bool):
    """Returns (action, value): keep, clear, or set."""
    if current not in (None, "") and secret:
        question = f"{label} [****] (Enter to keep, '-' to clear): "
    elif current not in (None, ""):
        question = f"{label} [{current}] (Enter to keep, '-' to clear): "
    else:
        question = f"{label} (Enter to skip): "

    raw = getpass.getpass(question) if secret else input(question)
    value = raw.strip()
    if not value:
        return 'keep', current
    if value == '-':
        return 'clear', None
    return 'set', value


def run_setup(manager: SettingsManager) -> int:
    """Interactive setup wizard. Only touches the stored file, never the environment."""
    stored = manager.load_stored()
    print(f"\n{bold('Setup Wizard')}\n")
    print("Press Enter to keep the current value, '-' to clear it.")
    print(dim("Secrets are stored in the local config file; protect your filesystem accordingly.\n"))

    updates = {}
    try:
        for name, label in WIZARD_PROMPTS:
            action, value = _prompt(label, getattr(stored, name), name in SECRET_FIELDS)
            if action == 'keep':
                continue
            if action == 'clear' and name in ('default_issue_type', 'llm_provider'):
                value = getattr(Settings(), name)
            updates[name] = value
    except (KeyboardInterrupt, EOFError):
        print()
        print(dim("Cancelled. Nothing saved."))
        return 1

    settings, warnings = replace(stored, **updates).validate()
    for message in warnings:
        print_warning(message)

    try:
        path = manager.save(settings)
    except ConfigError as e:
        print_error(str(e))
        return 1

    print_success(f"Saved to {path}")
    if any(os.environ.get(f"UGH_{f.name.upper()}") for f in fields(Settings)):
        print(dim("  Note: UGH_* environment variables still take precedence over the file."))
    return 0


def clear_cache(manager: SettingsManager) -> int:
    """Delete the draft cache so the next run asks the LLM again."""
    cache = DraftCache.for_settings(Settings(), manager.directory)
    try:
        removed = cache.clear()
    except OSError as e:
        print_error(f"Could not delete {cache.path}: {e}")
        return 1
    if removed:
        print_success(f"Removed {cache.path}")
    else:
        print(dim(f"No draft cache at {cache.path}"))
    return 0
