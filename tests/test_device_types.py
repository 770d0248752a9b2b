"""Test the probe topology catalog.

Tests for nwb_metadata.ntrode.device_types:
    - Exactly 12 entries, in catalog order
    - Channel/shank lookups, 0 for unknown/None/non-string
    - Per-shank channel counts fit the nominal channel count
    - Catalog matches the schema's device_type enum

Run:
    pytest tests/test_device_types.py -v
"""

from __future__ import annotations

import pytest

from nwb_metadata.ntrode import device_types
from nwb_metadata.ntrode.device_types import DeviceTypeSpec
from nwb_metadata.validation.schema_validation import load_schema


class TestCatalog:
    def test_twelve_entries(self) -> None:
        assert len(device_types.get_device_types()) == 12

    def test_order_starts_with_tetrode(self) -> None:
        types = device_types.get_device_types()
        assert types[0] == "tetrode_12.5"
        assert types[-1] == "NET-EBL-128ch-single-shank"

    def test_shanks_fit_channel_count(self) -> None:
        for type_id in device_types.get_device_types():
            spec = device_types.get_device_spec(type_id)
            assert spec.channels_per_shank * spec.shank_count <= spec.channel_count

    def test_matches_schema_enum(self) -> None:
        schema = load_schema()
        enum = schema["properties"]["electrode_groups"]["items"]["properties"]["device_type"]["enum"]
        assert enum == device_types.get_device_types()

    def test_catalog_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            device_types.DEVICE_TYPES["new_probe"] = DeviceTypeSpec("new_probe", 8, 1, 8)  # type: ignore[index]

    def test_spec_frozen(self) -> None:
        spec = device_types.get_device_spec("tetrode_12.5")
        with pytest.raises(AttributeError):
            spec.channel_count = 8  # type: ignore[misc]

    def test_spec_rejects_inconsistent_topology(self) -> None:
        with pytest.raises(ValueError, match="exceed"):
            DeviceTypeSpec("bad", 16, 4, 8)


class TestLookups:
    @pytest.mark.parametrize(
        "type_id, channels, shanks, per_shank",
        [
            ("tetrode_12.5", 4, 1, 4),
            ("A1x32-6mm-50-177-H32_21mm", 32, 1, 32),
            ("128c-4s8mm6cm-20um-40um-sl", 128, 4, 32),
            ("32c-2s8mm6cm-20um-40um-dl", 32, 2, 16),
            ("64c-4s6mm6cm-20um-40um-dl", 64, 4, 16),
            ("64c-3s6mm6cm-20um-40um-sl", 64, 3, 20),
            ("NET-EBL-128ch-single-shank", 128, 1, 128),
        ],
    )
    def test_known(self, type_id: str, channels: int, shanks: int, per_shank: int) -> None:
        assert device_types.channel_count(type_id) == channels
        assert device_types.shank_count(type_id) == shanks
        assert device_types.channels_per_shank(type_id) == per_shank
        assert device_types.is_valid_device_type(type_id)

    @pytest.mark.parametrize("type_id", ["unknown_probe", "", None, 4, ["tetrode_12.5"]])
    def test_unknown(self, type_id: object) -> None:
        assert device_types.channel_count(type_id) == 0
        assert device_types.shank_count(type_id) == 0
        assert device_types.channels_per_shank(type_id) == 0
        assert device_types.is_valid_device_type(type_id) is False
        assert device_types.get_device_spec(type_id) is None
