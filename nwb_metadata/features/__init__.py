"""Document workflows built on validation and the YAML codec."""

from .import_export import (
    ExcludedField,
    ExportResult,
    ImportResult,
    ImportSummary,
    ReconcileResult,
    export_document,
    import_file,
    import_text,
    reconcile,
    write_export,
)

__all__ = [
    'ExcludedField',
    'ExportResult',
    'ImportResult',
    'ImportSummary',
    'ReconcileResult',
    'export_document',
    'import_file',
    'import_text',
    'reconcile',
    'write_export',
]
