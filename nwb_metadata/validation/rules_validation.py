"""Cross-field business rules the JSON schema cannot express.

Rules (independent, none short-circuits another):

1. Tasks that reference cameras require ``cameras`` to be defined.
2. Associated video files that reference cameras require ``cameras``.
3. Optogenetics is all-or-nothing across ``opto_excitation_source``,
   ``optical_fiber`` and ``virus_injection``.
4. Channel wiring (ranges, duplicates, bad channels), delegated to
   :func:`nwb_metadata.ntrode.channel_maps.check_channel_maps`.

Only *absence* of ``cameras`` triggers rules 1-2; an empty camera list
satisfies them.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..ntrode import channel_maps
from .issues import Issue

logger = logging.getLogger(__name__)

OPTOGENETICS_FIELDS = ("opto_excitation_source", "optical_fiber", "virus_injection")
OPTOGENETICS_PATH = "optogenetics"


def _references_camera(camera_id: Any) -> bool:
    # tasks carry a list of camera ids, video files a single id
    if isinstance(camera_id, (list, tuple)):
        return len(camera_id) > 0
    return camera_id is not None and camera_id != ""


def _missing_camera(doc: Mapping[str, Any], field: str, label: str) -> list[Issue]:
    if doc.get("cameras") is not None:
        return []
    items = doc.get(field)
    if not isinstance(items, list) or not items:
        return []
    if any(isinstance(item, Mapping) and _references_camera(item.get("camera_id")) for item in items):
        return [Issue(
            field, "missing_camera", "error",
            f"{label} have camera_ids, but no cameras are defined",
        )]
    return []


def _is_filled(value: Any) -> bool:
    try:
        return value is not None and len(value) > 0
    except TypeError:
        return True


def _partial_optogenetics(doc: Mapping[str, Any]) -> list[Issue]:
    present = {name: _is_filled(doc.get(name)) for name in OPTOGENETICS_FIELDS}
    count = sum(present.values())
    if count in (0, len(OPTOGENETICS_FIELDS)):
        return []

    have = [name for name, ok in present.items() if ok]
    lack = [name for name, ok in present.items() if not ok]
    return [Issue(
        OPTOGENETICS_PATH, "partial_optogenetics_configuration", "error",
        "Partial optogenetics configuration: all of "
        f"{', '.join(OPTOGENETICS_FIELDS)} are required together. "
        f"Present: {', '.join(have)}. Missing: {', '.join(lack)}",
    )]


def validate_rules(doc: Any) -> list[Issue]:
    """Apply all cross-field rules to ``doc``; ``[]`` for a non-mapping."""
    if not isinstance(doc, Mapping):
        return []

    issues: list[Issue] = []
    issues += _missing_camera(doc, "tasks", "Tasks")
    issues += _missing_camera(doc, "associated_video_files", "Associated video files")
    issues += _partial_optogenetics(doc)
    issues += channel_maps.check_channel_maps(doc)

    logger.debug("Rule validation: %d issue(s)", len(issues))
    return issues
