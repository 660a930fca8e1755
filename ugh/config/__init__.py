"""Configuration Management Package

Settings live in config.json inside the config directory:

1. $UGH_CONFIG_DIR
2. $XDG_CONFIG_HOME/ugh
3. Platform default (~/.config/ugh, ~/Library/Application Support/ugh, %APPDATA%/ugh)

Every field can be overridden by UGH_<FIELD> in the environment.
"""

import json
import os
import sys
import tempfile
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Optional

from ugh.errors import ConfigError

CONFIG_FILENAME = "config.json"
ENV_PREFIX = "UGH_"

# Valid configuration values
VALID_LLM_PROVIDERS = {"claude"}
VALID_TRACKERS = {"jira"}

SECRET_FIELDS = {"jira_token", "llm_api_key"}


@dataclass(frozen=True)
class Settings:
    """User settings with sensible defaults. Loaded once, passed everywhere."""
    jira_base_url: Optional[str] = None
    jira_email: Optional[str] = None
    jira_token: Optional[str] = None
    default_project_key: Optional[str] = None
    default_issue_type: str = "Task"
    tracker_provider: str = "jira"
    llm_provider: str = "claude"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None
    cache_max_age_hours: float = 24.0

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> tuple['Settings', list[str]]:
        """Return a corrected copy and the list of warnings.

        Invalid values are replaced with defaults.
        """
        warnings = []
        defaults = Settings()
        fixes = {}

        if self.llm_provider not in VALID_LLM_PROVIDERS:
            warnings.append(f"Invalid llm_provider '{self.llm_provider}', using '{defaults.llm_provider}'")
            fixes['llm_provider'] = defaults.llm_provider

        if self.tracker_provider not in VALID_TRACKERS:
            warnings.append(f"Invalid tracker_provider '{self.tracker_provider}', using '{defaults.tracker_provider}'")
            fixes['tracker_provider'] = defaults.tracker_provider

        age = self.cache_max_age_hours
        if isinstance(age, bool) or not isinstance(age, (int, float)) or age <= 0:
            warnings.append(f"Invalid cache_max_age_hours '{age}', using {defaults.cache_max_age_hours}")
            fixes['cache_max_age_hours'] = defaults.cache_max_age_hours

        if not self.default_issue_type:
            fixes['default_issue_type'] = defaults.default_issue_type

        return (replace(self, **fixes) if fixes else self), warnings

    def missing_for_ticket(self, board_override: Optional[str] = None) -> list[str]:
        """Names of settings still needed before a ticket can be filed."""
        missing = []
        if not self.jira_base_url:
            missing.append("Jira base URL")
        if not self.jira_email:
            missing.append("Jira email")
        if not self.jira_token:
            missing.append("Jira API token")
        if not board_override and not self.default_project_key:
            missing.append("default project key")
        return missing

    @property
    def cache_max_age_seconds(self) -> float:
        return float(self.cache_max_age_hours) * 3600

    @classmethod
    def from_dict(cls, data: dict) -> 'Settings':
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def config_directory() -> Path:
    """Resolve the directory holding config.json and the draft cache."""
    custom = os.environ.get("UGH_CONFIG_DIR", "").strip()
    if custom:
        return Path(custom)

    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    if xdg:
        return Path(xdg) / "ugh"

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ugh"
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA", "").strip()
        if appdata:
            return Path(appdata) / "ugh"
    return Path.home() / ".config" / "ugh"


def env_overrides(environ: Optional[dict] = None) -> tuple[dict, list[str]]:
    """Collect UGH_<FIELD> overrides. Returns (values, warnings)."""
    environ = os.environ if environ is None else environ
    values = {}
    warnings = []
    for f in fields(Settings):
        name = ENV_PREFIX + f.name.upper()
        raw = environ.get(name)
        if raw is None or raw == "":
            continue
        if f.name == "cache_max_age_hours":
            try:
                values[f.name] = float(raw)
            except ValueError:
                warnings.append(f"Ignoring {name}={raw!r}: not a number")
            continue
        values[f.name] = raw.strip()
    return values, warnings


def atomic_write_json(path: Path, data: dict) -> None:
    """Write JSON next to path and rename over it, so readers never see half a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


class SettingsManager:
    """Loads and saves settings in the config directory."""

    def __init__(self, directory: Optional[Path] = None):
        self.directory = directory or config_directory()
        self.warnings: list[str] = []

    @property
    def path(self) -> Path:
        return self.directory / CONFIG_FILENAME

    def load_stored(self) -> Settings:
        """Settings from the file only, without environment overrides."""
        if not self.path.exists():
            return Settings()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (ValueError, OSError) as e:
            self.warnings.append(f"Could not load {self.path}: {e}")
            return Settings()
        if not isinstance(data, dict):
            self.warnings.append(f"Could not load {self.path}: expected a JSON object")
            return Settings()
        return Settings.from_dict(data)

    def load(self, environ: Optional[dict] = None) -> Settings:
        """File settings with UGH_* environment overrides applied, then validated."""
        self.warnings = []
        stored = self.load_stored()
        overrides, env_warnings = env_overrides(environ)
        self.warnings.extend(env_warnings)
        settings, validation_warnings = replace(stored, **overrides).validate()
        self.warnings.extend(validation_warnings)
        return settings

    def save(self, settings: Settings) -> Path:
        try:
            atomic_write_json(self.path, settings.to_dict())
        except OSError as e:
            raise ConfigError(f"Could not write {self.path}: {e}")
        return self.path


def mask_secret(value: Optional[str]) -> str:
    if not value:
        return "<not set>"
    if len(value) > 6:
        return f"{value[:3]}***{value[-3:]}"
    return "***"


__all__ = [
    "Settings",
    "SettingsManager",
    "config_directory",
    "env_overrides",
    "atomic_write_json",
    "mask_secret",
    "CONFIG_FILENAME",
    "SECRET_FIELDS",
    "VALID_LLM_PROVIDERS",
    "VALID_TRACKERS",
]
