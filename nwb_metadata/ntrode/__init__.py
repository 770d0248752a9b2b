"""Probe topology and ntrode channel maps.

    device_types  closed catalog of probe types (channels, shanks)
    channel_maps  per-shank map generation, wiring checks, group editing
"""

from . import channel_maps, device_types
from .channel_maps import ChannelMapEntry, belongs_to_group, generate_all
from .device_types import DeviceTypeSpec

__all__ = [
    'ChannelMapEntry',
    'DeviceTypeSpec',
    'belongs_to_group',
    'channel_maps',
    'device_types',
    'generate_all',
]
