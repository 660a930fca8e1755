"""Issue Tracker Base Classes"""

from abc import ABC, abstractmethod

from ugh.config import Settings
from ugh.errors import ProviderFatalError
from ugh.models import Draft, TicketRef


class TrackerError(ProviderFatalError):
    """Raised when the tracker cannot file a ticket."""
    pass


class TrackerNetworkError(TrackerError):
    """Connectivity problem, timeout or server-side failure."""
    pass


class TrackerAuthError(TrackerError):
    """Missing or rejected credentials."""
    pass


class TrackerValidationError(TrackerError):
    """The tracker rejected the ticket fields."""
    pass


class IssueTrackerProvider(ABC):
    """Abstract base for issue trackers.

    create_ticket() files exactly one ticket and is never retried: a timeout
    after the tracker accepted the request may leave a ticket behind.
    """

    @abstractmethod
    def create_ticket(self, draft: Draft, board_key: str, settings: Settings) -> TicketRef:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
