"""Hashing utilities for sqlmigrate."""

import hashlib


def sha256_hash(content: str) -> str:
    """Calculate SHA256 hash of text content.

    Args:
        content: Text content to hash (encoded as UTF-8).

    Returns:
        Lowercase hexadecimal SHA256 hash string.
    """
    return hashlib.sha256(content.encode()).hexdigest()


def sha256_hash_bytes(content: bytes) -> str:
    """Calculate SHA256 hash of bytes.

    Checksums stored in the control table are produced by this function,
    so its output format must not change.

    Args:
        content: Binary content to hash.

    Returns:
        Lowercase hexadecimal SHA256 hash string (64 characters).
    """
    return hashlib.sha256(content).hexdigest()
