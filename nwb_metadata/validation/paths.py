"""Instance-path normalization.

The JSON schema validator reports locations as slash-separated pointers
(``/cameras/0/id``).  Everything downstream (issue filtering, import
reconciliation, form highlighting) uses one dotted/bracketed grammar:

    field
    field.nested
    field[INDEX].nested

Numeric segments become ``[N]`` at any depth; named segments are joined
with ``.``.  The conversion is total: it never raises and degrades to a
best-effort path on malformed input.
"""

from __future__ import annotations

from typing import Any, Iterable

# ---------------------------------------------------------------------------
# Pointer segments
# ---------------------------------------------------------------------------


def _unescape(segment: str) -> str:
    # RFC 6901: ``~1`` must be decoded before ``~0``
    return segment.replace("~1", "/").replace("~0", "~")


def join_segments(segments: Iterable[Any]) -> str:
    """Build a normalized path from already-split segments.

    ``int`` segments and digit-only strings render as ``[N]``; anything
    else renders as a named segment.

    Examples
    --------
    >>> join_segments(["subject", "weight"])
    'subject.weight'
    >>> join_segments(["cameras", 0, "id"])
    'cameras[0].id'
    """
    out = []
    for segment in segments:
        if isinstance(segment, int) or (isinstance(segment, str) and segment.isdigit()):
            out.append(f"[{segment}]")
        elif out:
            out.append(f".{segment}")
        else:
            out.append(str(segment))
    return "".join(out)


def normalize_path(raw_path: Any) -> str:
    """Convert a slash-separated instance path to the dotted/bracketed form.

    Parameters
    ----------
    raw_path : str
        Validator-native path, e.g. ``/electrode_groups/15/targeted_x``.
        Non-string input is tolerated.

    Returns
    -------
    str
        Normalized path (``electrode_groups[15].targeted_x``); ``""`` for
        the document root, empty input or non-string input.

    Examples
    --------
    >>> normalize_path("/cameras/0/id")
    'cameras[0].id'
    >>> normalize_path("/")
    ''
    """
    if not isinstance(raw_path, str) or raw_path in ("", "/"):
        return ""

    segments = [_unescape(part) for part in raw_path.split("/") if part]
    return join_segments(segments)


def top_level_field(path: str) -> str:
    """First segment of a normalized path (``cameras[0].id`` -> ``cameras``)."""
    end = len(path)
    for sep in (".", "["):
        idx = path.find(sep)
        if idx != -1:
            end = min(end, idx)
    return path[:end]


def path_matches_field(path: str, field_path: str) -> bool:
    """True if ``path`` is ``field_path`` or a path nested below it.

    Matching is by segment, never by substring: ``subject`` matches
    ``subject.sex`` but not ``subject_id``.
    """
    if path == field_path:
        return True
    return path.startswith(field_path + ".") or path.startswith(field_path + "[")
