"""Filter-query engine for contribution listings.

A query is a list of tokens that must all match (AND):
- has:update / has:updates  - an advertised version is newer
- is:installed              - installed locally
- not:installed             - only advertised
- <anything>:<anything>     - unknown property, always matches
- free text                 - case-insensitive substring of author names,
                              descriptions, category or name
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .errors import FilterError
from .models import ContributionRecord

logger = logging.getLogger(__name__)

UPDATE_FILTERS = ("has:update", "has:updates")
INSTALLED_FILTER = "is:installed"
NOT_INSTALLED_FILTER = "not:installed"


def split_query(text: Optional[str]) -> List[str]:
    """Split a search-box string into filter tokens."""
    if not text:
        return []
    return text.split()


def _text_fields(record: ContributionRecord) -> Iterable[Optional[str]]:
    for author in record.authors:
        yield author.name
    yield record.short_description
    yield record.long_description
    yield record.category
    yield record.name


def matches(record: ContributionRecord, token: str) -> bool:
    """Check whether a single filter token matches a record."""
    if not isinstance(token, str):
        raise FilterError(f"Filter token must be a string, got {type(token).__name__}")

    if token in UPDATE_FILTERS:
        return record.has_updates()
    if token == INSTALLED_FILTER:
        return record.installed
    if token == NOT_INSTALLED_FILTER:
        return not record.installed
    if ":" in token:
        # Unknown properties never exclude anything
        logger.debug("Ignoring unknown filter %r", token)
        return True

    needle = token.lower()
    if not needle:
        return True
    return any(value is not None and needle in value.lower() for value in _text_fields(record))


class FilterEngine:
    """Evaluates filter tokens and an optional category against records."""

    def filter(
        self,
        category: Optional[str],
        tokens: Sequence[str],
        records: Iterable[ContributionRecord],
    ) -> List[ContributionRecord]:
        """Return the records matching the category and every token, in input order."""
        tokens = list(tokens)
        result = []
        for record in records:
            if category is not None and record.category != category:
                continue
            if all(matches(record, t) for t in tokens):
                result.append(record)
        return result
