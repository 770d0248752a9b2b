"""Two-layer validation of metadata documents.

``validate`` merges structural (JSON schema) and cross-field rule issues
and sorts them by ``(path, code)`` as the very last step, so callers never
observe validator-internal ordering.

Usage:
    from nwb_metadata.validation import validate, validate_field

    issues = validate(doc)
    subject_issues = validate_field(doc, "subject")
"""

from __future__ import annotations

from typing import Any

from .issues import Issue, has_errors, sort_issues
from .paths import normalize_path, path_matches_field, top_level_field
from .rules_validation import validate_rules
from .schema_validation import SchemaValidator, schema_fingerprint, validate_schema


def validate(doc: Any, validator: SchemaValidator | None = None) -> list[Issue]:
    """All schema and rule issues of ``doc``, sorted by ``(path, code)``.

    Parameters
    ----------
    doc : dict
        Metadata document; not mutated.
    validator : SchemaValidator, optional
        Overrides the process-wide validator (custom schema).
    """
    return sort_issues(validate_schema(doc, validator) + validate_rules(doc))


def validate_field(doc: Any, field_path: str, validator: SchemaValidator | None = None) -> list[Issue]:
    """Issues at ``field_path`` or nested below it (segment match, not substring)."""
    return [i for i in validate(doc, validator) if path_matches_field(i.path, field_path)]


__all__ = [
    'Issue',
    'SchemaValidator',
    'has_errors',
    'normalize_path',
    'path_matches_field',
    'schema_fingerprint',
    'sort_issues',
    'top_level_field',
    'validate',
    'validate_field',
    'validate_rules',
    'validate_schema',
]
