"""Branch Namer - Render type/TICKET-KEY/slug and check it out."""

import re

from ugh.models import Draft, TicketRef, coerce_branch_type, sanitize_slug

_KEY_JUNK = re.compile(r'[^A-Za-z0-9_-]+')


class BranchNamer:
    """Derives branch names from a filed ticket and its draft."""

    def __init__(self, max_slug_length: int | None = None):
        self.max_slug_length = max_slug_length

    def name_for(self, ticket: TicketRef, draft: Draft) -> str:
        """Pure function of (ticket, draft). The slug is always re-sanitized."""
        branch_type = coerce_branch_type(draft.suggested_type)
        key = _KEY_JUNK.sub('', ticket.key.strip())
        if self.max_slug_length:
            slug = sanitize_slug(draft.suggested_slug, self.max_slug_length)
        else:
            slug = sanitize_slug(draft.suggested_slug)
        return f"{branch_type}/{key}/{slug}"

    def checkout(self, branch_name: str, workspace) -> None:
        """Create and switch to branch_name. GitError propagates unchanged."""
        workspace.checkout_new_branch(branch_name)
