"""Ntrode channel maps: generation, consistency checks and group editing.

One :class:`ChannelMapEntry` (an *ntrode*) exists per shank of every
electrode group.  A freshly generated entry holds the identity map of its
shank, offset so that shanks of the same group never share hardware
channels::

    shank k:  map[i] = k * channels_per_shank + i,   0 <= i < channels_per_shank

Ntrode ids run from 1 across one generation call, in electrode-group order
then shank order.  The running id is threaded through the generators as an
explicit argument; nothing here keeps module state.

Editing helpers (:func:`assign_device_type`, :func:`remove_electrode_group`,
:func:`duplicate_electrode_group`, :func:`regenerate_channel_maps`,
:func:`set_bad_channels`) take a metadata document and return a new one;
the input is never mutated.
"""

from __future__ import annotations

import copy
import logging
from collections import Counter
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ..utils.strings import comma_separated_string_to_numbers, is_integer
from ..validation.issues import Issue
from . import device_types

logger = logging.getLogger(__name__)

CHANNEL_MAP_FIELD = "ntrode_electrode_group_channel_map"
ELECTRODE_GROUPS_FIELD = "electrode_groups"

# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ChannelMapEntry:
    """Channel map of one ntrode (one shank of an electrode group).

    Parameters
    ----------
    ntrode_id : int
        Document-wide ntrode number, starting at 1.
    electrode_group_id : int | str
        ``id`` of the owning electrode group, type preserved.
    bad_channels : tuple[int, ...]
        Channel indices flagged as non-functional; subset of ``map`` keys.
    map : dict[int, int]
        Channel index -> hardware channel.
    """

    ntrode_id: int
    electrode_group_id: int | str
    bad_channels: tuple[int, ...] = ()
    map: dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Document form, key order matching the exported YAML."""
        return {
            "ntrode_id": self.ntrode_id,
            "electrode_group_id": self.electrode_group_id,
            "bad_channels": list(self.bad_channels),
            "map": dict(self.map),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChannelMapEntry":
        raw_map = data.get("map") or {}
        return cls(
            ntrode_id=int(data["ntrode_id"]),
            electrode_group_id=data["electrode_group_id"],
            bad_channels=tuple(int(c) for c in data.get("bad_channels") or ()),
            map={int(k): int(v) for k, v in raw_map.items()},
        )


def belongs_to_group(entry: ChannelMapEntry | Mapping[str, Any], group_id: Any) -> bool:
    """Cascade predicate: True if ``entry`` is owned by electrode group ``group_id``.

    Ids compare by their string form, so ``0`` and ``"0"`` name the same group.
    """
    if isinstance(entry, ChannelMapEntry):
        owner = entry.electrode_group_id
    elif isinstance(entry, Mapping):
        owner = entry.get("electrode_group_id")
    else:
        return False
    return owner is not None and str(owner) == str(group_id)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def generate_for_group(group: Mapping[str, Any], start_ntrode_id: int) -> list[ChannelMapEntry]:
    """Identity channel maps for every shank of one electrode group.

    Parameters
    ----------
    group : Mapping
        Electrode group with ``id`` and ``device_type``.
    start_ntrode_id : int
        Ntrode id given to the first shank; later shanks count up from it.

    Returns
    -------
    list[ChannelMapEntry]
        ``shank_count`` entries, or ``[]`` when the device type is unknown.
    """
    spec = device_types.get_device_spec(group.get("device_type"))
    if spec is None:
        logger.debug(
            "Skipping electrode group %r: unknown device type %r",
            group.get("id"), group.get("device_type"),
        )
        return []

    cps = spec.channels_per_shank
    return [
        ChannelMapEntry(
            ntrode_id=start_ntrode_id + shank,
            electrode_group_id=group.get("id"),
            bad_channels=(),
            map={i: shank * cps + i for i in range(cps)},
        )
        for shank in range(spec.shank_count)
    ]


def generate_all(electrode_groups: Iterable[Mapping[str, Any]]) -> list[ChannelMapEntry]:
    """Channel maps for all electrode groups, ntrode ids sequential from 1.

    Groups with an unknown device type are skipped and do not consume ids.

    Examples
    --------
    >>> [e.to_dict() for e in generate_all([{"id": "0", "device_type": "tetrode_12.5"}])]
    [{'ntrode_id': 1, 'electrode_group_id': '0', 'bad_channels': [], 'map': {0: 0, 1: 1, 2: 2, 3: 3}}]
    """
    entries: list[ChannelMapEntry] = []
    next_ntrode_id = 1
    for group in electrode_groups or ():
        if not isinstance(group, Mapping):
            continue
        group_entries = generate_for_group(group, next_ntrode_id)
        entries.extend(group_entries)
        next_ntrode_id += len(group_entries)
    return entries


# ---------------------------------------------------------------------------
# Consistency checks
# ---------------------------------------------------------------------------


def _as_channel(value: Any) -> int | None:
    """Channel index as int (``3`` or ``"3"``), None if not an index."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if is_integer(value):
        return int(value)
    return None


def _format_values(values: Iterable[Any]) -> str:
    return ", ".join(str(v) for v in values)


def _group_device_types(doc: Mapping[str, Any]) -> dict[str, Any]:
    groups = doc.get(ELECTRODE_GROUPS_FIELD)
    if not isinstance(groups, list):
        return {}
    return {
        str(g.get("id")): g.get("device_type")
        for g in groups
        if isinstance(g, Mapping) and g.get("id") is not None
    }


def _check_entry(index: int, entry: Mapping[str, Any], cps: int) -> list[Issue]:
    base = f"{CHANNEL_MAP_FIELD}[{index}]"
    label = entry.get("ntrode_id", index)
    issues: list[Issue] = []

    channel_map = entry.get("map")
    keys: set[int] = set()
    if isinstance(channel_map, Mapping):
        keys = {k for k in (_as_channel(k) for k in channel_map) if k is not None}

        if cps:
            out_of_range = [
                k for k in channel_map
                if _as_channel(k) is None or not 0 <= _as_channel(k) < cps
            ]
            if out_of_range:
                issues.append(Issue(
                    f"{base}.map", "channel_out_of_range", "error",
                    f"Ntrode {label} has channel index(es) {_format_values(out_of_range)} "
                    f"outside 0-{cps - 1}",
                ))
            missing = [i for i in range(cps) if i not in keys]
            if missing:
                issues.append(Issue(
                    f"{base}.map", "missing_channel", "warning",
                    f"Ntrode {label} has no hardware channel for index(es) "
                    f"{_format_values(missing)}",
                ))

        values = [v for v in channel_map.values() if isinstance(v, Hashable)]
        duplicates = [v for v, n in Counter(values).items() if n > 1]
        if duplicates:
            issues.append(Issue(
                f"{base}.map", "duplicate_hardware_channel", "error",
                f"Ntrode {label} maps hardware channel(s) {_format_values(duplicates)} "
                f"to multiple channel indices",
            ))

    bad_channels = entry.get("bad_channels")
    if isinstance(bad_channels, list):
        stray = [c for c in bad_channels if _as_channel(c) not in keys]
        if stray:
            issues.append(Issue(
                f"{base}.bad_channels", "bad_channel_not_in_map", "error",
                f"Ntrode {label} lists bad channel(s) {_format_values(stray)} "
                f"that are not in its channel map",
            ))

    return issues


def check_channel_maps(doc: Any) -> list[Issue]:
    """Wiring checks for every ntrode channel map of ``doc``.

    Per entry at index ``N``:

    - ``channel_out_of_range``: a map key outside ``[0, channels_per_shank)``
      of the owning group's device type
    - ``missing_channel`` (warning): a channel index of that range has no map key
    - ``duplicate_hardware_channel``: two keys share a hardware channel
    - ``bad_channel_not_in_map``: a bad channel that is not a map key

    Entries whose group or device type is unknown only get the duplicate
    and bad-channel checks.
    """
    if not isinstance(doc, Mapping):
        return []
    entries = doc.get(CHANNEL_MAP_FIELD)
    if not isinstance(entries, list):
        return []

    group_types = _group_device_types(doc)
    issues: list[Issue] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            continue
        device_type = group_types.get(str(entry.get("electrode_group_id")))
        cps = device_types.channels_per_shank(device_type)
        issues.extend(_check_entry(index, entry, cps))
    return issues


# ---------------------------------------------------------------------------
# Id allocation
# ---------------------------------------------------------------------------


def _numeric_id(value: Any) -> int:
    channel = _as_channel(value)
    return channel if channel is not None else 0


def next_electrode_group_id(electrode_groups: Iterable[Mapping[str, Any]]) -> str:
    """Id for a new electrode group: max numeric id + 1, ``"0"`` when empty.

    Non-numeric ids count as 0.
    """
    ids = [_numeric_id(g.get("id")) for g in electrode_groups or () if isinstance(g, Mapping)]
    if not ids:
        return "0"
    return str(max(ids) + 1)


def next_ntrode_id(entries: Iterable[Mapping[str, Any]]) -> int:
    """Ntrode id following the largest existing one; 1 for no entries."""
    ids = [_numeric_id(e.get("ntrode_id")) for e in entries or () if isinstance(e, Mapping)]
    return max(ids) + 1 if ids else 1


# ---------------------------------------------------------------------------
# Document editing
# ---------------------------------------------------------------------------


def _renumber(entries: list[dict]) -> None:
    for ntrode_id, entry in enumerate(entries, start=1):
        entry["ntrode_id"] = ntrode_id


def regenerate_channel_maps(doc: Mapping[str, Any]) -> dict:
    """New document whose channel maps are regenerated from its electrode groups.

    Destructive for the channel maps: edited maps and bad channels are lost.
    """
    out = copy.deepcopy(dict(doc))
    out[CHANNEL_MAP_FIELD] = [e.to_dict() for e in generate_all(out.get(ELECTRODE_GROUPS_FIELD) or [])]
    return out


def assign_device_type(doc: Mapping[str, Any], index: int, device_type: str) -> dict:
    """Set the device type of ``electrode_groups[index]`` and rebuild its maps.

    The group's previous maps are replaced by fresh identity maps appended
    at the end, then every ntrode is renumbered from 1 in list order.

    Raises
    ------
    IndexError
        If ``index`` does not address an electrode group.
    """
    out = copy.deepcopy(dict(doc))
    group = out[ELECTRODE_GROUPS_FIELD][index]
    group["device_type"] = device_type

    entries = [
        e for e in out.get(CHANNEL_MAP_FIELD) or []
        if not belongs_to_group(e, group.get("id"))
    ]
    entries.extend(e.to_dict() for e in generate_for_group(group, next_ntrode_id(entries)))
    _renumber(entries)
    out[CHANNEL_MAP_FIELD] = entries

    logger.debug("Electrode group %r set to %s", group.get("id"), device_type)
    return out


def remove_electrode_group(doc: Mapping[str, Any], index: int) -> dict:
    """Remove ``electrode_groups[index]`` and every channel map it owns.

    Raises
    ------
    IndexError
        If ``index`` does not address an electrode group.
    """
    out = copy.deepcopy(dict(doc))
    group = out[ELECTRODE_GROUPS_FIELD].pop(index)
    out[CHANNEL_MAP_FIELD] = [
        e for e in out.get(CHANNEL_MAP_FIELD) or []
        if not belongs_to_group(e, group.get("id"))
    ]
    return out


def duplicate_electrode_group(doc: Mapping[str, Any], index: int) -> dict:
    """Clone ``electrode_groups[index]`` right after itself, maps included.

    The clone gets :func:`next_electrode_group_id` (as ``int`` when the
    source id is an ``int``); its maps get ntrode ids following the
    largest existing one.

    Raises
    ------
    IndexError
        If ``index`` does not address an electrode group.
    """
    out = copy.deepcopy(dict(doc))
    groups = out[ELECTRODE_GROUPS_FIELD]
    source = groups[index]

    new_id: int | str = next_electrode_group_id(groups)
    if isinstance(source.get("id"), int):
        new_id = int(new_id)
    clone = copy.deepcopy(source)
    clone["id"] = new_id

    entries = out.get(CHANNEL_MAP_FIELD) or []
    ntrode_id = next_ntrode_id(entries)
    cloned_entries = []
    for entry in entries:
        if belongs_to_group(entry, source.get("id")):
            cloned = copy.deepcopy(entry)
            cloned["electrode_group_id"] = new_id
            cloned["ntrode_id"] = ntrode_id
            ntrode_id += 1
            cloned_entries.append(cloned)

    groups.insert(index + 1, clone)
    out[CHANNEL_MAP_FIELD] = entries + cloned_entries
    return out


def set_bad_channels(doc: Mapping[str, Any], index: int, text: str) -> dict:
    """Set ``bad_channels`` of channel map ``index`` from comma-separated text.

    Non-integer tokens are dropped; duplicates collapse.

    Raises
    ------
    IndexError
        If ``index`` does not address a channel map entry.
    """
    out = copy.deepcopy(dict(doc))
    out[CHANNEL_MAP_FIELD][index]["bad_channels"] = comma_separated_string_to_numbers(text)
    return out
