"""Probe catalog: device type -> channel and shank topology.

A closed table of the 12 probe types the conversion pipeline ships probe
metadata for.  ``channels_per_shank`` is the size of one ntrode's channel
map; hardware channels of shank *k* occupy
``[k * channels_per_shank, (k + 1) * channels_per_shank)``.

Notes
-----
``64c-3s6mm6cm-20um-40um-sl`` wires 20 channels per shank, so its three
ntrode maps cover 60 of the 64 nominal channels.

All lookups are total: unknown ids, ``None`` and non-string input give
``0`` / ``False`` / ``None`` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class DeviceTypeSpec:
    """Topology of one probe type.

    Parameters
    ----------
    id : str
        Device type identifier as written in ``electrode_groups[].device_type``.
    channel_count : int
        Nominal channel count of the whole probe.
    shank_count : int
        Number of shanks; one ntrode channel map is generated per shank.
    channels_per_shank : int
        Entries in each shank's channel map.
    """

    id: str
    channel_count: int
    shank_count: int
    channels_per_shank: int

    def __post_init__(self) -> None:
        if self.shank_count < 1 or self.channels_per_shank < 1:
            raise ValueError(f"{self.id}: shank and channel counts must be positive")
        if self.channels_per_shank * self.shank_count > self.channel_count:
            raise ValueError(f"{self.id}: shanks exceed nominal channel count")


_CATALOG: tuple[DeviceTypeSpec, ...] = (
    DeviceTypeSpec("tetrode_12.5", 4, 1, 4),
    DeviceTypeSpec("A1x32-6mm-50-177-H32_21mm", 32, 1, 32),
    DeviceTypeSpec("128c-4s8mm6cm-20um-40um-sl", 128, 4, 32),
    DeviceTypeSpec("128c-4s6mm6cm-15um-26um-sl", 128, 4, 32),
    DeviceTypeSpec("128c-4s8mm6cm-15um-26um-sl", 128, 4, 32),
    DeviceTypeSpec("128c-4s6mm6cm-20um-40um-sl", 128, 4, 32),
    DeviceTypeSpec("128c-4s4mm6cm-20um-40um-sl", 128, 4, 32),
    DeviceTypeSpec("128c-4s4mm6cm-15um-26um-sl", 128, 4, 32),
    DeviceTypeSpec("32c-2s8mm6cm-20um-40um-dl", 32, 2, 16),
    DeviceTypeSpec("64c-4s6mm6cm-20um-40um-dl", 64, 4, 16),
    DeviceTypeSpec("64c-3s6mm6cm-20um-40um-sl", 64, 3, 20),
    DeviceTypeSpec("NET-EBL-128ch-single-shank", 128, 1, 128),
)

DEVICE_TYPES: Mapping[str, DeviceTypeSpec] = MappingProxyType(
    {spec.id: spec for spec in _CATALOG}
)


def get_device_spec(device_type: Any) -> DeviceTypeSpec | None:
    """Catalog entry for ``device_type``, or ``None`` if unknown."""
    if not isinstance(device_type, str):
        return None
    return DEVICE_TYPES.get(device_type)


def is_valid_device_type(device_type: Any) -> bool:
    return get_device_spec(device_type) is not None


def channel_count(device_type: Any) -> int:
    """Nominal channel count; 0 for unknown device types."""
    spec = get_device_spec(device_type)
    return spec.channel_count if spec else 0


def shank_count(device_type: Any) -> int:
    """Shank count; 0 for unknown device types."""
    spec = get_device_spec(device_type)
    return spec.shank_count if spec else 0


def channels_per_shank(device_type: Any) -> int:
    """Channel map size per shank; 0 for unknown device types."""
    spec = get_device_spec(device_type)
    return spec.channels_per_shank if spec else 0


def get_device_types() -> list[str]:
    """All device type ids, in catalog order."""
    return [spec.id for spec in _CATALOG]
