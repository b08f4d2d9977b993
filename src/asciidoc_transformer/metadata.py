"""Typed extraction of author and revision metadata from document attributes."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from asciidoc_transformer.types import Author

logger = logging.getLogger(__name__)

AUTHOR_FIELDS = ("author", "email", "firstname", "lastname", "middlename", "authorinitials")

_AUTHOR_KEY_RX = re.compile(rf"^({'|'.join(AUTHOR_FIELDS)})(?:_(\d+))?$")

# Formats tried after ISO 8601 and RFC 2822
_DATE_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
)


def extract_authors(attributes: Mapping[str, Any]) -> list[Author]:
    """Build the author list from ``<field>_<n>`` keys, ordered by ``n``.

    Without indexed keys the un-suffixed keys describe a single author,
    which may be empty.
    """
    indexes = sorted(
        {
            int(match.group(2))
            for key in attributes
            if (match := _AUTHOR_KEY_RX.match(key)) and match.group(2)
        }
    )
    if not indexes:
        return [Author(**{name: _text(attributes.get(name)) for name in AUTHOR_FIELDS})]
    return [
        Author(**{name: _text(attributes.get(f"{name}_{index}")) for name in AUTHOR_FIELDS})
        for index in indexes
    ]


def without_author_attributes(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``attributes`` minus every author field, indexed or not."""
    return {key: value for key, value in attributes.items() if not _AUTHOR_KEY_RX.match(key)}


def parse_revnumber(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        logger.debug("Revision number '%s' is not numeric", value)
        return None


def parse_revdate(value: Any) -> datetime | None:
    """Parse a revision date; a date without a UTC offset is taken as GMT."""
    if not value:
        return None
    text = str(value).strip()
    parsed = _parse_date(text)
    if parsed is None:
        logger.debug("Unrecognised revision date '%s'", text)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_date(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError):
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)
