"""Test SHA-256 helpers and the schema fingerprint.

Tests for nwb_metadata.utils.hashing:
    - sha256_file(): known digest, chunked reads, missing file
    - sha256_text(): UTF-8 encoding
    - schema_fingerprint() of the packaged schema is stable

Run:
    pytest tests/test_hash.py -v
"""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from nwb_metadata.utils import hashing
from nwb_metadata.validation import schema_validation

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestSha256:
    def test_empty_text(self) -> None:
        assert hashing.sha256_text("") == EMPTY_SHA256

    def test_text_is_utf8(self) -> None:
        assert hashing.sha256_text("μm") == hashlib.sha256("μm".encode("utf-8")).hexdigest()

    def test_file_matches_text(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.yml"
        path.write_bytes("lab: Frank Lab\nunits: μm\n".encode("utf-8"))
        assert hashing.sha256_file(path) == hashing.sha256_text("lab: Frank Lab\nunits: μm\n")

    def test_small_chunks(self, tmp_path: Path) -> None:
        path = tmp_path / "blob.bin"
        data = bytes(range(256)) * 40
        path.write_bytes(data)
        assert hashing.sha256_file(path, chunk_size=7) == hashlib.sha256(data).hexdigest()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            hashing.sha256_file(tmp_path / "missing.json")

    def test_hex_format(self) -> None:
        digest = hashing.sha256_text("x")
        assert len(digest) == 64
        assert digest == digest.lower()


class TestSchemaFingerprint:
    def test_packaged_schema(self) -> None:
        fingerprint = schema_validation.schema_fingerprint()
        assert fingerprint == hashing.sha256_file(schema_validation.SCHEMA_PATH)
        assert fingerprint == schema_validation.schema_fingerprint()

    def test_changes_with_content(self, tmp_path: Path) -> None:
        copy = tmp_path / "nwb_schema.json"
        copy.write_bytes(schema_validation.SCHEMA_PATH.read_bytes() + b"\n")
        assert schema_validation.schema_fingerprint(copy) != schema_validation.schema_fingerprint()
