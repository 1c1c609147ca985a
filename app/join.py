from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from .errors import EmptySource, UnexpectedFailure
from .models import JoinedRow, SourceRecord
from .rules import PLACEHOLDER

logger = logging.getLogger(__name__)


def build_lookup(records: Sequence[SourceRecord], field: str) -> Dict[int, Any]:
    """Map identifier -> field value. Later duplicates overwrite earlier ones."""
    return {record.id: getattr(record, field, None) for record in records}


def _value_or_placeholder(lookup: Dict[int, Any], identifier: int) -> Any:
    value = lookup.get(identifier)
    if value is None or value == "":
        return PLACEHOLDER
    return value


def join_sources(
    users: Sequence[SourceRecord],
    posts: Sequence[SourceRecord],
    comments: Sequence[SourceRecord],
    max_identifier: Optional[int] = None,
) -> List[JoinedRow]:
    """
    Join users, posts and comments by identifier.

    One row is produced for every identifier from 1 to the largest identifier
    seen in any source, in ascending order. Values missing from a source are
    filled with the placeholder.

    Raises:
        EmptySource: if any of the three collections is empty.
        UnexpectedFailure: if the identifier space exceeds ``max_identifier``.
    """
    empty = [
        label
        for label, records in (("users", users), ("posts", posts), ("comments", comments))
        if not records
    ]
    if empty:
        raise EmptySource(empty)

    names = build_lookup(users, "name")
    titles = build_lookup(posts, "title")
    bodies = build_lookup(comments, "body")

    max_id = max(max(names), max(titles), max(bodies))
    if max_identifier is not None and max_id > max_identifier:
        raise UnexpectedFailure(
            f"Identifier space too large: max id {max_id} exceeds limit {max_identifier}"
        )

    rows = []
    for identifier in range(1, max_id + 1):
        rows.append(
            JoinedRow(
                name=str(_value_or_placeholder(names, identifier)),
                title=str(_value_or_placeholder(titles, identifier)),
                body=str(_value_or_placeholder(bodies, identifier)),
            )
        )

    logger.info(f"Joined {len(rows)} rows (max id {max_id})")
    return rows
