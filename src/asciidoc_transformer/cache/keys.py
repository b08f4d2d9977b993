"""Cache key generation — content-addressed, per derivation."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from asciidoc_transformer.types import DocumentNode

AST_KEY = "ast"
HTML_KEY = "html"
HEADINGS_KEY = "headings"
TIME_TO_READ_KEY = "timeToRead"


def fingerprint(node: DocumentNode, derivation_key: str) -> str:
    """Generate a SHA256 cache key for one derived artifact of a node.

    Only content, origin and timestamp identify the document state. The
    derivation key keeps the artifacts of a single node (AST, HTML, views)
    in separate slots. Absent fields still hash, as ``null``.
    """
    return _hash_dict(
        {
            "content": node.content,
            "path": node.internal.origin,
            "timestamp": node.internal.timestamp,
            "key": derivation_key,
        }
    )


def _hash_dict(d: dict[str, Any]) -> str:
    """Deterministic hash of a dict via sorted JSON."""
    serialized = json.dumps(d, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()
