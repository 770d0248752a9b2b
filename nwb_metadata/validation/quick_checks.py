"""Lightweight per-field checks for as-you-type feedback.

Each check returns ``None`` when the value is acceptable, or an
:class:`Issue` with ``severity="hint"``.  Hints never block export; the
full :func:`nwb_metadata.validation.validate` run is authoritative.

Optional-field checks (``date_format``, ``enum``, ``number_range``,
``pattern``) accept empty values; only ``required`` flags them.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from .issues import Issue

ISO_8601_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _hint(path: str, code: str, message: str) -> Issue:
    return Issue(path, code, "hint", message)


def required(path: str, value: Any) -> Issue | None:
    if _is_empty(value):
        return _hint(path, "required", "This field is required")
    return None


def date_format(path: str, value: Any) -> Issue | None:
    """ISO 8601 date-time prefix, e.g. ``2023-06-22T14:30:00``."""
    if _is_blank(value):
        return None
    if not isinstance(value, str) or not ISO_8601_PREFIX.match(value):
        return _hint(
            path, "date_format",
            "Date must be in ISO 8601 format (YYYY-MM-DDTHH:MM:SS, e.g., 2023-06-22T14:30:00)",
        )
    return None


def enum(path: str, value: Any, valid_values: Sequence[Any]) -> Issue | None:
    if _is_blank(value):
        return None
    if value not in valid_values:
        return _hint(path, "enum", f"Must be one of: {', '.join(str(v) for v in valid_values)}")
    return None


def number_range(
    path: str,
    value: Any,
    min_value: float | None = None,
    max_value: float | None = None,
    unit: str | None = None,
) -> Issue | None:
    """Numeric value (or numeric text) within ``[min_value, max_value]``."""
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return _hint(path, "number_range", "Must be a valid number")

    suffix = f" {unit}" if unit else ""
    if min_value is not None and number < min_value:
        return _hint(path, "number_range", f"Must be at least {min_value}{suffix}")
    if max_value is not None and number > max_value:
        return _hint(path, "number_range", f"Must be at most {max_value}{suffix}")
    return None


def pattern(path: str, value: Any, regex: str | re.Pattern, message: str | None = None) -> Issue | None:
    if value is None or value == "":
        return None
    if not re.search(regex, str(value)):
        return _hint(path, "pattern", message or "Value has invalid format")
    return None
