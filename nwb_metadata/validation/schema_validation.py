"""Structural validation against the packaged JSON schema (Draft-07).

The schema is compiled once at import time into a process-wide
:class:`SchemaValidator`; every call to :func:`validate_schema` reuses it.
Each violation becomes one :class:`~nwb_metadata.validation.issues.Issue`
with ``code`` set to the violated keyword and ``severity="error"``.

Path handling
-------------
jsonschema reports ``required`` violations at the *parent* object.  Those
issues are re-addressed to the missing field itself (``subject`` missing
``subject_id`` -> ``subject.subject_id``) so that field-level filtering and
import reconciliation see the right location.

Documents decoded from YAML may carry ``int`` mapping keys (channel maps);
validation runs on a JSON-compatible view with stringified keys and never
touches the caller's document.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

from ..utils import hashing
from .issues import Issue
from .paths import normalize_path

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "nwb_schema.json"

NON_EMPTY_PATTERN = "\\S"
DATE_OF_BIRTH_PATH = "subject.date_of_birth"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _json_view(value: Any) -> Any:
    """Copy of ``value`` with mapping keys stringified and tuples as lists."""
    if isinstance(value, dict):
        return {str(k): _json_view(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_view(v) for v in value]
    return value


def _pointer(segments: Any) -> str:
    escaped = (str(s).replace("~", "~0").replace("/", "~1") for s in segments)
    return "/" + "/".join(escaped)


def _missing_property(error: ValidationError) -> str | None:
    """Name of the property a ``required`` error is about."""
    instance = error.instance if isinstance(error.instance, dict) else {}
    missing = [p for p in error.validator_value if p not in instance]
    for prop in missing:
        if error.message.startswith(repr(prop)):
            return prop
    return missing[0] if missing else None


def _describe(path: str, error: ValidationError) -> str:
    keyword = error.validator
    if path == DATE_OF_BIRTH_PATH and keyword in ("pattern", "format", "type"):
        return "Date of birth needs to comply with ISO 8601 format"
    if keyword == "pattern" and error.validator_value == NON_EMPTY_PATTERN:
        return f"{path} cannot be empty or contain only whitespace"
    return f"{path or 'document'}: {error.message}"


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class SchemaValidator:
    """Compiled Draft-07 validator producing normalized issues.

    Parameters
    ----------
    schema : dict
        JSON schema document.  Checked against the Draft-07 metaschema.

    Raises
    ------
    jsonschema.exceptions.SchemaError
        If ``schema`` is not a valid Draft-07 schema.
    """

    def __init__(self, schema: dict) -> None:
        Draft7Validator.check_schema(schema)
        self.schema = schema
        self._validator = Draft7Validator(schema)

    @classmethod
    def from_file(cls, path: str | Path) -> "SchemaValidator":
        return cls(load_schema(path))

    def iter_issues(self, doc: Any):
        for error in self._validator.iter_errors(_json_view(doc)):
            yield self._to_issue(error)

    def validate(self, doc: Any) -> list[Issue]:
        """All schema violations of ``doc`` (unsorted)."""
        issues = list(self.iter_issues(doc))
        logger.debug("Schema validation: %d issue(s)", len(issues))
        return issues

    @staticmethod
    def _to_issue(error: ValidationError) -> Issue:
        segments = list(error.absolute_path)
        if error.validator == "required":
            missing = _missing_property(error)
            if missing is not None:
                segments.append(missing)
            path = normalize_path(_pointer(segments))
            return Issue(path, "required", "error", f"{path} is required")

        path = normalize_path(_pointer(segments)) if segments else ""
        return Issue(path, str(error.validator), "error", _describe(path, error))


# ---------------------------------------------------------------------------
# Module API
# ---------------------------------------------------------------------------


def load_schema(path: str | Path = SCHEMA_PATH) -> dict:
    """Read a JSON schema file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


_DEFAULT_VALIDATOR = SchemaValidator(load_schema())


@lru_cache(maxsize=8)
def _validator_for(path: str) -> SchemaValidator:
    logger.info("Compiling schema override: %s", path)
    return SchemaValidator.from_file(path)


def get_validator(schema_path: str | Path | None = None) -> SchemaValidator:
    """Process-wide validator; ``schema_path`` selects a compiled override."""
    if schema_path is None or Path(schema_path).resolve() == SCHEMA_PATH:
        return _DEFAULT_VALIDATOR
    return _validator_for(str(Path(schema_path).resolve()))


def validate_schema(doc: Any, validator: SchemaValidator | None = None) -> list[Issue]:
    """Validate ``doc`` against the schema; one error Issue per violation."""
    return (validator or _DEFAULT_VALIDATOR).validate(doc)


def schema_fingerprint(path: str | Path = SCHEMA_PATH) -> str:
    """SHA-256 of the schema file, for drift checks against the pipeline copy."""
    return hashing.sha256_file(path)
