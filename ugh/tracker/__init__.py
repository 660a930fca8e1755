"""Issue Tracker Package"""

from ugh.config import Settings
from ugh.errors import ConfigError
from ugh.tracker.base import (
    IssueTrackerProvider, TrackerError, TrackerNetworkError, TrackerAuthError, TrackerValidationError,
)
from ugh.tracker.jira import JiraTracker

TRACKERS = {
    "jira": JiraTracker,
}


def get_tracker(settings: Settings) -> IssueTrackerProvider:
    """Get the tracker named by settings.tracker_provider."""
    if settings.tracker_provider in TRACKERS:
        return TRACKERS[settings.tracker_provider]()

    raise ConfigError(
        f"Unknown tracker: {settings.tracker_provider}. "
        f"Use one of: {', '.join(sorted(TRACKERS))}."
    )


__all__ = [
    "IssueTrackerProvider",
    "TrackerError",
    "TrackerNetworkError",
    "TrackerAuthError",
    "TrackerValidationError",
    "JiraTracker",
    "get_tracker",
    "TRACKERS",
]
