"""Tests for hashing utilities."""

import hashlib

from sqlmigrate.utils.hashing import sha256_hash, sha256_hash_bytes


class TestSha256HashBytes:
    """Tests for sha256_hash_bytes."""

    def test_known_digest(self):
        """Digest of empty input should match the published SHA-256 value."""
        assert (
            sha256_hash_bytes(b"")
            == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_lowercase_hex_of_fixed_length(self):
        """Digest should be 64 lowercase hex characters."""
        digest = sha256_hash_bytes(b"CREATE TABLE t(x INT);")

        assert len(digest) == 64
        assert digest == digest.lower()
        int(digest, 16)

    def test_deterministic(self):
        """Same bytes should always give the same digest."""
        content = b"INSERT INTO t VALUES (1);"
        assert sha256_hash_bytes(content) == sha256_hash_bytes(content)

    def test_single_byte_change_changes_digest(self):
        """Editing one byte should change the digest."""
        assert sha256_hash_bytes(b"SELECT 1;") != sha256_hash_bytes(b"SELECT 2;")


class TestSha256Hash:
    """Tests for sha256_hash."""

    def test_matches_utf8_bytes_digest(self):
        """Text digest should equal the digest of its UTF-8 encoding."""
        text = "INSERT INTO t VALUES ('café');"
        assert sha256_hash(text) == hashlib.sha256(text.encode("utf-8")).hexdigest()
        assert sha256_hash(text) == sha256_hash_bytes(text.encode("utf-8"))
