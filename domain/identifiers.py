from __future__ import annotations

import re

from .errors import MalformedIdentifier

SEPARATOR = "-"

# Group lengths of a canonical UUID: 8-4-4-4-12.
_GROUPS = (8, 4, 4, 4, 12)
_COMPACT_RE = re.compile(r"[0-9a-fA-F]{32}")


def canonicalize(identifier: str) -> str:
    """
    Convert a compact (hyphen-free) UUID to its canonical hyphenated form.

    Empty identifiers and identifiers that already contain a separator are
    returned unchanged, so the function is idempotent. Any other input must
    be exactly 32 hex characters; otherwise `MalformedIdentifier` is raised.
    """

    if identifier == "" or SEPARATOR in identifier:
        return identifier

    if not _COMPACT_RE.fullmatch(identifier):
        raise MalformedIdentifier(identifier)

    parts = []
    start = 0
    for length in _GROUPS:
        parts.append(identifier[start:start + length])
        start += length
    return SEPARATOR.join(parts)
