"""Import and export of metadata documents.

Import
------
``import_text`` decodes YAML, validates it, and reconciles it with a
default document:

- No issues: the whole document is accepted; default keys it lacks are
  filled in.
- Issues: every top-level field named by an issue path falls back to its
  default, as does any field whose runtime kind differs from the default
  (a mapping where a list is expected, ...).  Remaining fields keep the
  imported values.  The result lists excluded fields with the reason.

Export
------
``export_document`` is the export gate: any ``"error"`` issue blocks it.
Otherwise it returns the deterministic YAML and canonical filename;
``write_export`` also writes the file atomically.

Only :class:`~nwb_metadata.utils.fs.ParseError` escapes these functions for
bad input; validation findings are always returned as issues.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from .. import value_lists
from ..utils import fs
from ..utils.logging_config import get_context, pop_context, push_context
from ..validation import Issue, SchemaValidator, has_errors, top_level_field, validate

logger = logging.getLogger(__name__)

TYPE_MISMATCH = "type mismatch"

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExcludedField:
    """A top-level field replaced by its default during import."""

    field: str
    reason: str


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    document: dict
    imported_fields: list[str]
    excluded_fields: list[ExcludedField]


@dataclass(frozen=True, slots=True)
class ImportSummary:
    """Caller-facing account of a (possibly partial) import.

    Parameters
    ----------
    total_fields : int
        Default fields present in the imported file.
    imported_fields : list[str]
        Fields taken from the file.
    excluded_fields : list[ExcludedField]
        Fields replaced by defaults, with the first reason found.
    """

    total_fields: int
    imported_fields: list[str]
    excluded_fields: list[ExcludedField]

    @property
    def has_exclusions(self) -> bool:
        return len(self.excluded_fields) > 0


@dataclass(frozen=True, slots=True)
class ImportResult:
    document: dict
    issues: list[Issue]
    summary: ImportSummary

    @property
    def partial(self) -> bool:
        return self.summary.has_exclusions


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Outcome of the export gate.

    ``yaml`` and ``filename`` are set only when ``success`` is True;
    ``path`` only after :func:`write_export` wrote the file.
    """

    success: bool
    issues: list[Issue]
    yaml: str | None = None
    filename: str | None = None
    path: Path | None = None


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


def runtime_kind(value: Any) -> str:
    """JSON kind of a decoded value; ``bool`` is not a number."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def reconcile(
    parsed_doc: Mapping[str, Any],
    issues: Sequence[Issue],
    defaults: Mapping[str, Any],
) -> ReconcileResult:
    """Merge an imported document with defaults under field-level validity.

    Parameters
    ----------
    parsed_doc : Mapping
        Decoded document; not mutated.
    issues : Sequence[Issue]
        Validation issues of ``parsed_doc``.
    defaults : Mapping
        Default document; every key of it is present in the result.

    Returns
    -------
    ReconcileResult
        New document plus imported and excluded field lists.

    Notes
    -----
    With issues present, only fields of ``defaults`` survive, and an
    invalid ``subject.sex`` is coerced to ``"U"`` instead of discarding the
    subject.
    """
    if not issues:
        document = copy.deepcopy(dict(parsed_doc))
        for key, value in defaults.items():
            if key not in document:
                document[key] = copy.deepcopy(value)
        imported = [key for key in defaults if key in parsed_doc]
        return ReconcileResult(document, imported, [])

    reasons: dict[str, str] = {}
    for issue in issues:
        reasons.setdefault(top_level_field(issue.path), issue.message)

    document: dict = {}
    imported: list[str] = []
    excluded: list[ExcludedField] = []
    for key, default in defaults.items():
        if key in reasons:
            document[key] = copy.deepcopy(default)
            excluded.append(ExcludedField(key, reasons[key]))
        elif key not in parsed_doc:
            document[key] = copy.deepcopy(default)
        elif runtime_kind(parsed_doc[key]) != runtime_kind(default):
            document[key] = copy.deepcopy(default)
            excluded.append(ExcludedField(key, TYPE_MISMATCH))
        else:
            document[key] = copy.deepcopy(parsed_doc[key])
            imported.append(key)

    if not isinstance(document.get("subject"), dict):
        document["subject"] = copy.deepcopy(defaults.get("subject", {}))

    subject = document["subject"]
    if "sex" in subject and subject["sex"] not in value_lists.gender_codes():
        logger.debug("Coercing subject.sex %r to %r", subject["sex"], value_lists.UNKNOWN_SEX_CODE)
        subject["sex"] = value_lists.UNKNOWN_SEX_CODE

    return ReconcileResult(document, imported, excluded)


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def import_text(
    text: str,
    defaults: Mapping[str, Any] | None = None,
    validator: SchemaValidator | None = None,
) -> ImportResult:
    """Decode, validate and reconcile a YAML metadata document.

    Parameters
    ----------
    text : str
        YAML text.
    defaults : Mapping, optional
        Fallback document; :func:`value_lists.empty_form_data` if omitted.
    validator : SchemaValidator, optional
        Schema override.

    Returns
    -------
    ImportResult

    Raises
    ------
    ParseError
        If ``text`` is not a valid YAML mapping.
    """
    if defaults is None:
        defaults = value_lists.empty_form_data()

    parsed = fs.decode_yaml(text)
    issues = validate(parsed, validator)
    # warnings are reported but never exclude a field
    result = reconcile(parsed, [i for i in issues if i.is_error], defaults)

    summary = ImportSummary(
        total_fields=sum(1 for key in defaults if key in parsed),
        imported_fields=result.imported_fields,
        excluded_fields=result.excluded_fields,
    )
    if summary.has_exclusions:
        logger.info(
            "Partial import: %d field(s) imported, %d excluded (%s)",
            len(summary.imported_fields), len(summary.excluded_fields),
            ", ".join(e.field for e in summary.excluded_fields),
        )
    else:
        logger.info("Import accepted: %d field(s)", len(summary.imported_fields))

    return ImportResult(result.document, issues, summary)


def import_file(
    path: str | Path,
    defaults: Mapping[str, Any] | None = None,
    validator: SchemaValidator | None = None,
) -> ImportResult:
    """:func:`import_text` on the contents of a UTF-8 YAML file.

    Raises
    ------
    FileNotFoundError
        If ``path`` doesn't exist
    ParseError
        If the file is not a valid YAML mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Metadata file not found: {path}")

    saved_context = get_context()
    push_context(document=path.name)
    try:
        return import_text(path.read_text(encoding="utf-8"), defaults, validator)
    finally:
        pop_context()
        push_context(**saved_context)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def export_document(doc: Mapping[str, Any], validator: SchemaValidator | None = None) -> ExportResult:
    """Validate ``doc`` and, if no error-severity issue exists, encode it."""
    form = copy.deepcopy(dict(doc))
    issues = validate(form, validator)

    if has_errors(issues):
        n_errors = sum(1 for i in issues if i.is_error)
        logger.warning("Export blocked: %d error(s)", n_errors)
        return ExportResult(success=False, issues=issues)

    return ExportResult(
        success=True,
        issues=issues,
        yaml=fs.encode_yaml(form),
        filename=fs.format_filename(form),
    )


def write_export(
    doc: Mapping[str, Any],
    output_dir: str | Path,
    validator: SchemaValidator | None = None,
) -> ExportResult:
    """:func:`export_document`, then write the YAML atomically into ``output_dir``.

    Nothing is written when the export is blocked.
    """
    result = export_document(doc, validator)
    if not result.success:
        return result

    path = Path(output_dir) / result.filename
    fs.atomic_write_text(path, result.yaml)
    logger.info("Exported %s", path)
    return ExportResult(result.success, result.issues, result.yaml, result.filename, path)
