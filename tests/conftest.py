"""Shared fixtures: a reference metadata document that passes validation."""

from __future__ import annotations

import copy
from pathlib import Path

import pytest

from nwb_metadata.utils import fs

FIXTURES_DIR = Path(__file__).parent / "fixtures"
MINIMAL_VALID = FIXTURES_DIR / "minimal_valid.yml"

_MINIMAL_VALID_DOC = fs.load_yaml(MINIMAL_VALID)


@pytest.fixture()
def valid_doc() -> dict:
    """Fresh copy of tests/fixtures/minimal_valid.yml (no issues)."""
    return copy.deepcopy(_MINIMAL_VALID_DOC)


@pytest.fixture()
def valid_yaml_text() -> str:
    return MINIMAL_VALID.read_text(encoding="utf-8")
