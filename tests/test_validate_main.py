"""Test the validate_main() callable and the CLI exit codes.

Tests for scripts/validate_metadata.py:
    - validate_main() on a clean file: no issues, nothing excluded
    - Field filter keeps only issues at or below the field
    - Export written only when no error-severity issue exists
    - main(): exit codes 0 / 1 / 2 and --fingerprint

Run:
    pytest tests/test_validate_main.py -v
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from nwb_metadata.utils import fs, logging_config
from nwb_metadata.utils.validators import ToolConfigV1
from nwb_metadata.validation import schema_validation
from scripts import validate_metadata

REPO_CONFIG = Path(__file__).resolve().parent.parent / "configs" / "tool.v1.yaml"


@pytest.fixture()
def session_file(tmp_path: Path, valid_doc: dict) -> Path:
    path = tmp_path / "session.yml"
    fs.atomic_yaml_dump(valid_doc, path)
    return path


@pytest.fixture()
def run_cli(monkeypatch: pytest.MonkeyPatch):
    """Run main() with argv, restoring logging and the excepthook afterwards."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)

    def _run(*argv: str) -> int:
        monkeypatch.setattr(sys, "argv", ["validate_metadata.py", "--config", str(REPO_CONFIG), *argv])
        return validate_metadata.main()

    yield _run

    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)
    logging_config.pop_context()
    logging.captureWarnings(False)
    logging_config._configured = False


class TestValidateMain:
    def test_clean_file(self, session_file: Path) -> None:
        result = validate_metadata.validate_main(str(session_file), ToolConfigV1())
        assert result["issues"] == []
        assert result["n_errors"] == 0
        assert not result["summary"].has_exclusions
        assert result["export_path"] is None

    def test_field_filter(self, tmp_path: Path, valid_doc: dict) -> None:
        valid_doc["lab"] = ""
        valid_doc["subject"]["sex"] = "X"
        path = tmp_path / "session.yml"
        fs.atomic_yaml_dump(valid_doc, path)

        result = validate_metadata.validate_main(str(path), ToolConfigV1(), field_path="subject")
        assert [i.path for i in result["issues"]] == ["subject.sex"]
        assert result["n_errors"] == 2
        assert {e.field for e in result["summary"].excluded_fields} == {"lab", "subject"}

    def test_export(self, tmp_path: Path, session_file: Path) -> None:
        result = validate_metadata.validate_main(
            str(session_file), ToolConfigV1(), export=True, output_dir=str(tmp_path / "out"),
        )
        assert result["export_path"] == tmp_path / "out" / "06222023_rat01_metadata.yml"
        assert result["export_path"].read_text(encoding="utf-8") == session_file.read_text(encoding="utf-8")

    def test_export_blocked(self, tmp_path: Path, valid_doc: dict) -> None:
        del valid_doc["lab"]
        path = tmp_path / "session.yml"
        fs.atomic_yaml_dump(valid_doc, path)
        result = validate_metadata.validate_main(
            str(path), ToolConfigV1(), export=True, output_dir=str(tmp_path / "out"),
        )
        assert result["export_path"] is None
        assert not (tmp_path / "out").exists()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            validate_metadata.validate_main(str(tmp_path / "missing.yml"), ToolConfigV1())


class TestMain:
    def test_exit_clean(self, run_cli, session_file: Path) -> None:
        assert run_cli(str(session_file)) == 0

    def test_exit_errors(self, run_cli, tmp_path: Path, valid_doc: dict) -> None:
        valid_doc["keywords"] = []
        path = tmp_path / "session.yml"
        fs.atomic_yaml_dump(valid_doc, path)
        assert run_cli(str(path)) == 1

    def test_exit_errors_outside_field(self, run_cli, tmp_path: Path, valid_doc: dict) -> None:
        valid_doc["lab"] = ""
        path = tmp_path / "session.yml"
        fs.atomic_yaml_dump(valid_doc, path)
        out_dir = tmp_path / "out"
        assert run_cli(str(path), "--field", "subject", "--export", "--output", str(out_dir)) == 1
        assert not out_dir.exists()

    def test_exit_unreadable(self, run_cli, tmp_path: Path) -> None:
        path = tmp_path / "broken.yml"
        path.write_text("lab: [unclosed\n", encoding="utf-8")
        assert run_cli(str(path)) == 2
        assert run_cli(str(tmp_path / "missing.yml")) == 2

    def test_fingerprint(self, run_cli, capsys: pytest.CaptureFixture) -> None:
        assert run_cli("--fingerprint") == 0
        assert capsys.readouterr().out.strip() == schema_validation.schema_fingerprint()
