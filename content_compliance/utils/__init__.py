"""Helper utilities shared across compliance components."""

from .checksum import content_hash, fingerprint_rows, sha256_text

__all__ = ["content_hash", "fingerprint_rows", "sha256_text"]
