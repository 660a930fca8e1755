"""Error taxonomy shared across the ticket pipeline."""


class UghError(Exception):
    """Base for all errors raised by ugh."""
    pass


class ConfigError(UghError):
    """Raised when settings are invalid or incomplete."""
    pass


class UserInputError(UghError):
    """Problems the user has to fix. Reported once, never retried."""
    pass


class NoChangesFound(UserInputError):
    """The workspace has no staged, unstaged or untracked changes."""

    def __init__(self, message: str = "No uncommitted changes found. Make some changes first."):
        super().__init__(message)


class MissingBoardKey(UserInputError):
    """Neither --board nor default_project_key is set."""

    def __init__(self, message: str = "No board given. Pass --board PROJECT or set default_project_key."):
        super().__init__(message)


class ProviderTransientError(UghError):
    """Draft provider failure. Recovered by the heuristic fallback."""
    pass


class ProviderFatalError(UghError):
    """Issue tracker failure. Aborts the workflow."""
    pass


class GitError(UghError):
    """Raised when git operations fail."""
    pass
