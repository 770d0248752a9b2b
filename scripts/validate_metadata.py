"""Validate (and optionally export) a session metadata YAML file.

Runs the same pipeline as an interactive import:
    1. Load tool config (configs/tool.v1.yaml) and set up logging
    2. Decode the YAML file (syntax errors abort with exit code 2)
    3. Validate: schema + cross-field rules, issues sorted by (path, code)
    4. Report the partial-import summary (fields that would fall back to defaults)
    5. With --export: write the canonical ``{date}_{subject}_metadata.yml``
       into the export directory, unless any error-severity issue exists

Refactored architecture:
    - validate_main(metadata_path, tool_cfg, ...) → dict
        * Callable function (used by batch checks)
        * Returns: {issues, n_errors, summary, export_path}
    - CLI entry point: if __name__ == "__main__"

CLI:
    python scripts/validate_metadata.py session.yml
    python scripts/validate_metadata.py session.yml --export --output outputs/metadata/
    python scripts/validate_metadata.py session.yml --field subject
    python scripts/validate_metadata.py --fingerprint

Exit codes:
    0  no error-severity issues (warnings allowed)
    1  validation errors (export blocked)
    2  unreadable input or invalid tool config
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from nwb_metadata.features import import_export
from nwb_metadata.utils import fs, validators
from nwb_metadata.utils.logging_config import install_excepthook, push_context, setup_logging, shutdown
from nwb_metadata.validation import path_matches_field, schema_validation

logger = logging.getLogger(__name__)


def validate_main(
    metadata_path: str,
    tool_cfg: validators.ToolConfigV1,
    export: bool = False,
    output_dir: Optional[str] = None,
    field_path: Optional[str] = None,
) -> Dict[str, Any]:
    """Validate one metadata file and optionally export it.

    Parameters
    ----------
    metadata_path : str
        YAML metadata file
    tool_cfg : ToolConfigV1
        Tool configuration (schema override, import defaults, export dir)
    export : bool
        Write the canonical export file when validation passes
    output_dir : Optional[str]
        Export directory, default tool_cfg.export.output_dir
    field_path : Optional[str]
        Only report issues at or below this field

    Returns
    -------
    Dict[str, Any]
        issues (filtered by field_path), n_errors (all fields),
        summary (ImportSummary), export_path (or None)

    Raises
    ------
    FileNotFoundError
        If metadata_path doesn't exist
    ParseError
        If the file is not valid YAML
    """
    validator = schema_validation.get_validator(tool_cfg.validation.schema_path)

    result = import_export.import_file(
        metadata_path,
        defaults=tool_cfg.defaults_document(),
        validator=validator,
    )
    issues = result.issues
    # counted before filtering: the export gate sees every field
    n_errors = sum(1 for i in issues if i.is_error)
    if field_path:
        issues = [i for i in issues if path_matches_field(i.path, field_path)]

    export_path = None
    if export:
        exported = import_export.write_export(
            fs.load_yaml(metadata_path),
            output_dir or tool_cfg.export.output_dir,
            validator=validator,
        )
        export_path = exported.path

    return {
        'issues': issues,
        'n_errors': n_errors,
        'summary': result.summary,
        'export_path': export_path,
    }


def main() -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Validate a session metadata YAML file and optionally export it"
    )
    parser.add_argument(
        "metadata",
        type=str,
        nargs="?",
        help="Path to metadata YAML file",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/tool.v1.yaml",
        help="Path to tool config",
    )
    parser.add_argument(
        "--field",
        type=str,
        default=None,
        help="Only report issues at or below this field (e.g. subject, cameras[0])",
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Write the canonical metadata file when validation passes",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Export directory (overrides tool config)",
    )
    parser.add_argument(
        "--fingerprint",
        action="store_true",
        help="Print the SHA-256 of the active JSON schema and exit",
    )

    args = parser.parse_args()

    try:
        tool_cfg = (
            validators.load_tool_config(args.config)
            if Path(args.config).exists()
            else validators.ToolConfigV1()
        )
    except validators.ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(**tool_cfg.logging.setup_kwargs(), context={'app': 'validate_metadata'})
    install_excepthook()

    if args.fingerprint:
        schema_path = tool_cfg.validation.schema_path or schema_validation.SCHEMA_PATH
        print(schema_validation.schema_fingerprint(schema_path))
        return 0

    if not args.metadata:
        parser.error("metadata file is required unless --fingerprint is given")

    push_context(document=Path(args.metadata).name)
    try:
        result = validate_main(
            metadata_path=args.metadata,
            tool_cfg=tool_cfg,
            export=args.export,
            output_dir=args.output,
            field_path=args.field,
        )
    except (FileNotFoundError, fs.ParseError) as e:
        logger.error(f"Cannot read {args.metadata}: {e}")
        return 2

    for issue in result['issues']:
        print(f"{issue.severity:<7} {issue.path or '<document>'} [{issue.code}] {issue.message}")

    summary = result['summary']
    print("\n=== Validation Complete ===")
    print(f"Issues shown: {len(result['issues'])} ({result['n_errors']} error(s) in the document)")
    if summary.has_exclusions:
        print("Fields that would fall back to defaults on import:")
        for excluded in summary.excluded_fields:
            print(f"  {excluded.field}: {excluded.reason}")
    if result['export_path']:
        print(f"Exported: {result['export_path']}")

    return 1 if result['n_errors'] else 0


if __name__ == "__main__":
    exit_code = main()
    shutdown()
    sys.exit(exit_code)
