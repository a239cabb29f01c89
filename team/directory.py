"""
team/directory.py -- User directory search, scoped to the requester.

search_users() composes the two stores: the team store supplies the ids the
requester has already added, the user store does the matching. The requester
is always excluded from their own results.
"""

import math

from auth.store import UserStore
from team.models import SearchResult
from team.store import TeamStore

MIN_QUERY_LENGTH = 2


def search_users(
    user_store: UserStore,
    team_store: TeamStore,
    requester_id: int,
    query: str,
    page: int = 1,
    limit: int = 10,
) -> SearchResult:
    """Find users whose email or full name contains query (case-insensitive).

    A trimmed query shorter than MIN_QUERY_LENGTH returns an empty result
    without touching either store. That is a throttle on broad scans, not a
    validation error.

    Args:
        page:  1-based page number.
        limit: Page size; must be >= 1 (the route enforces the bounds).
    """
    needle = (query or "").strip()
    if len(needle) < MIN_QUERY_LENGTH:
        return SearchResult(users=[], total=0, page=page, pages=0)

    excluded = set(team_store.list_subject_ids(requester_id))
    excluded.add(requester_id)

    found, total = user_store.search_users(
        needle,
        exclude_ids=sorted(excluded),
        offset=(page - 1) * limit,
        limit=limit,
    )
    return SearchResult(users=found, total=total, page=page, pages=math.ceil(total / limit))
