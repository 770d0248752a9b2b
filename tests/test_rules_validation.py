"""Test cross-field business rules.

Tests for nwb_metadata.validation.rules_validation:
    - Tasks / associated video files referencing cameras need ``cameras``
    - Absence (not emptiness) of cameras is the violation
    - Optogenetics all-or-nothing, None counts as empty
    - fs_gui_yamls and stimulation software are not part of the group
    - Channel wiring checks are included
    - Non-mapping documents yield no issues

Run:
    pytest tests/test_rules_validation.py -v
"""

from __future__ import annotations

import pytest

from nwb_metadata.validation.rules_validation import validate_rules

OPTO_SOURCE = {"name": "Omicron LuxX+ Blue", "model_name": "LuxX+ 488-100"}
FIBER = {"name": "Optical fiber 1", "hardware_name": "Doric"}
VIRUS = {"name": "Injection 1", "virus_name": "AAV5-CaMKIIa-hChR2"}


def _codes(issues) -> list[tuple[str, str]]:
    return [(i.path, i.code) for i in issues]


# ---------------------------------------------------------------------------
# Camera references
# ---------------------------------------------------------------------------


class TestMissingCamera:
    def test_tasks_without_cameras(self) -> None:
        doc = {"tasks": [{"task_name": "sleep", "camera_id": [0]}]}
        issues = validate_rules(doc)
        assert _codes(issues) == [("tasks", "missing_camera")]
        assert issues[0].severity == "error"

    def test_cameras_none_counts_as_absent(self) -> None:
        doc = {"cameras": None, "tasks": [{"camera_id": [1]}]}
        assert _codes(validate_rules(doc)) == [("tasks", "missing_camera")]

    def test_empty_camera_list_satisfies(self) -> None:
        doc = {"cameras": [], "tasks": [{"camera_id": [0]}]}
        assert validate_rules(doc) == []

    def test_tasks_without_camera_ids(self) -> None:
        doc = {"tasks": [{"task_name": "sleep", "camera_id": []}, {"task_name": "run"}]}
        assert validate_rules(doc) == []

    def test_video_files_without_cameras(self) -> None:
        doc = {"associated_video_files": [{"name": "run.h264", "camera_id": 0, "task_epochs": 1}]}
        assert _codes(validate_rules(doc)) == [("associated_video_files", "missing_camera")]

    def test_both_rules_fire_independently(self) -> None:
        doc = {
            "tasks": [{"camera_id": [0]}],
            "associated_video_files": [{"camera_id": [0]}],
        }
        assert sorted(_codes(validate_rules(doc))) == [
            ("associated_video_files", "missing_camera"),
            ("tasks", "missing_camera"),
        ]

    def test_valid_document(self, valid_doc: dict) -> None:
        assert validate_rules(valid_doc) == []


# ---------------------------------------------------------------------------
# Optogenetics
# ---------------------------------------------------------------------------


class TestOptogenetics:
    def test_partial_configuration(self) -> None:
        doc = {"opto_excitation_source": [OPTO_SOURCE], "optical_fiber": [], "virus_injection": []}
        issues = validate_rules(doc)
        assert len(issues) == 1
        assert issues[0].code == "partial_optogenetics_configuration"
        assert issues[0].path == "optogenetics"

    def test_message_names_present_and_missing(self) -> None:
        doc = {"opto_excitation_source": [OPTO_SOURCE], "optical_fiber": [FIBER], "virus_injection": []}
        message = validate_rules(doc)[0].message
        assert "Present: opto_excitation_source, optical_fiber" in message
        assert "Missing: virus_injection" in message

    def test_complete_configuration(self) -> None:
        doc = {"opto_excitation_source": [OPTO_SOURCE], "optical_fiber": [FIBER], "virus_injection": [VIRUS]}
        assert validate_rules(doc) == []

    def test_none_configured(self) -> None:
        assert validate_rules({"opto_excitation_source": [], "optical_fiber": [], "virus_injection": []}) == []
        assert validate_rules({}) == []

    def test_none_counts_as_empty(self) -> None:
        doc = {"opto_excitation_source": None, "optical_fiber": [FIBER], "virus_injection": None}
        issues = validate_rules(doc)
        assert _codes(issues) == [("optogenetics", "partial_optogenetics_configuration")]
        assert "Missing: opto_excitation_source, virus_injection" in issues[0].message

    def test_fs_gui_and_software_not_involved(self) -> None:
        doc = {
            "fs_gui_yamls": [{"name": "fs_gui.yaml", "epochs": [1]}],
            "optogenetic_stimulation_software": "fsgui",
        }
        assert validate_rules(doc) == []


# ---------------------------------------------------------------------------
# Channel wiring and input handling
# ---------------------------------------------------------------------------


class TestWiringAndInput:
    def test_duplicate_channels_reported(self) -> None:
        doc = {
            "electrode_groups": [{"id": 0, "device_type": "tetrode_12.5"}],
            "ntrode_electrode_group_channel_map": [
                {"ntrode_id": 1, "electrode_group_id": 0, "bad_channels": [], "map": {0: 5, 1: 5, 2: 7, 3: 8}}
            ],
        }
        assert _codes(validate_rules(doc)) == [
            ("ntrode_electrode_group_channel_map[0].map", "duplicate_hardware_channel")
        ]

    @pytest.mark.parametrize("doc", [None, [], "tasks", 42])
    def test_non_mapping(self, doc: object) -> None:
        assert validate_rules(doc) == []
