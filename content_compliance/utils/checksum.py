"""Checksum helpers for content redaction and rule-set versioning."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Iterable, Mapping


def sha256_text(text: str) -> str:
    # surrogatepass keeps rejected, non-encodable submissions hashable for the audit trail.
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()


def content_hash(content: Any) -> str:
    """SHA256 of submitted content; the raw text itself is never stored."""
    if isinstance(content, bytes):
        return hashlib.sha256(content).hexdigest()
    return sha256_text(content if isinstance(content, str) else "")


def fingerprint_rows(rows: Iterable[Mapping[str, Any]], length: int = 12) -> str:
    """Stable short digest of rule rows, independent of row order."""
    hasher = hashlib.sha256()
    encoded = sorted(json.dumps(row, sort_keys=True, ensure_ascii=False, default=str) for row in rows)
    for line in encoded:
        hasher.update(line.encode("utf-8"))
        hasher.update(b"\n")
    return hasher.hexdigest()[:length]


__all__ = ["sha256_text", "content_hash", "fingerprint_rows"]
