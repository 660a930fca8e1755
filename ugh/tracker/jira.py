"""Jira Issue Tracker"""

import base64
import json
import socket
import urllib.error
import urllib.request

from ugh.config import Settings
from ugh.models import Draft, TicketRef
from ugh.tracker.base import (
    IssueTrackerProvider, TrackerError, TrackerAuthError, TrackerNetworkError, TrackerValidationError,
)


def _error_details(body: bytes) -> str:
    """Flatten Jira's {"errorMessages": [...], "errors": {...}} into one line."""
    try:
        data = json.loads(body.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return body.decode('utf-8', errors='replace').strip()[:200]
    if not isinstance(data, dict):
        return ""
    parts = [str(m) for m in data.get('errorMessages') or []]
    errors = data.get('errors') or {}
    if isinstance(errors, dict):
        parts.extend(f"{field}: {message}" for field, message in errors.items())
    return "; ".join(parts)


class JiraTracker(IssueTrackerProvider):
    """Jira REST v2 client. Uses basic auth with email + API token."""

    API_PATH = "/rest/api/2/issue"
    DEFAULT_TIMEOUT = 30

    def __init__(self, opener=None, timeout: int | None = None):
        self._open = opener or urllib.request.urlopen
        self.timeout = timeout or self.DEFAULT_TIMEOUT

    @property
    def name(self) -> str:
        return "Jira"

    def _build_request(self, draft: Draft, board_key: str, settings: Settings) -> urllib.request.Request:
        payload = {
            "fields": {
                "project": {"key": board_key},
                "summary": draft.title,
                "description": draft.description,
                "issuetype": {"name": settings.default_issue_type},
            }
        }
        credentials = f"{settings.jira_email}:{settings.jira_token}".encode('utf-8')
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": "Basic " + base64.b64encode(credentials).decode('ascii'),
        }
        url = settings.jira_base_url.rstrip('/') + self.API_PATH
        return urllib.request.Request(url, data=json.dumps(payload).encode('utf-8'),
                                      headers=headers, method="POST")

    def create_ticket(self, draft: Draft, board_key: str, settings: Settings) -> TicketRef:
        if not settings.jira_base_url:
            raise TrackerError("Jira base URL not configured. Run: ugh config init")
        if not settings.jira_email or not settings.jira_token:
            raise TrackerAuthError("Jira email and API token are required. Run: ugh config init")

        try:
            req = self._build_request(draft, board_key, settings)
        except ValueError as e:
            raise TrackerError(f"Invalid jira_base_url {settings.jira_base_url!r} ({e}). "
                               "Use a full URL such as https://company.atlassian.net")
        try:
            with self._open(req, timeout=self.timeout) as response:
                body = response.read()
        except urllib.error.HTTPError as e:
            details = _error_details(e.read() or b"")
            suffix = f": {details}" if details else ""
            if e.code in (401, 403):
                raise TrackerAuthError(f"Jira rejected the credentials ({e.code}){suffix}")
            if e.code == 400:
                raise TrackerValidationError(f"Jira rejected the ticket{suffix}")
            if e.code == 404:
                raise TrackerValidationError(f"Jira endpoint not found at {req.full_url}. Check jira_base_url.")
            raise TrackerNetworkError(f"Jira error ({e.code}): {e.reason}{suffix}")
        except urllib.error.URLError as e:
            if isinstance(e.reason, socket.timeout):
                raise TrackerNetworkError(f"Jira request timed out after {self.timeout}s")
            raise TrackerNetworkError(f"Could not reach Jira: {e.reason}")
        except (socket.timeout, TimeoutError):
            raise TrackerNetworkError(f"Jira request timed out after {self.timeout}s")
        except OSError as e:
            raise TrackerNetworkError(f"Connection to Jira lost: {e}")

        try:
            data = json.loads(body.decode('utf-8'))
            key = data["key"]
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError):
            raise TrackerError("Jira accepted the request but returned an unexpected response")
        if not isinstance(key, str) or not key.strip():
            raise TrackerError(f"Jira accepted the request but returned no usable issue key: {key!r}")

        return TicketRef(key=key, url=f"{settings.jira_base_url.rstrip('/')}/browse/{key}")
