"""Validation findings.

An :class:`Issue` is one normalized finding from either validation layer
(schema or cross-field rules).  Issues are plain values: they are
reported, never raised.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Literal

Severity = Literal["error", "warning", "hint"]

SEVERITIES: tuple[str, ...] = ("error", "warning", "hint")


@dataclass(frozen=True, slots=True)
class Issue:
    """A single validation finding.

    Parameters
    ----------
    path : str
        Normalized location (``field``, ``field.nested``,
        ``field[INDEX].nested``); ``""`` addresses the whole document.
    code : str
        Machine-readable kind: a schema keyword (``required``,
        ``pattern``, ...) or a rule code (``missing_camera``, ...).
    severity : ``"error"`` | ``"warning"`` | ``"hint"``
        Only ``"error"`` blocks export.
    message : str
        Human-readable description.
    """

    path: str
    code: str
    severity: Severity
    message: str

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(
                f"severity must be one of {SEVERITIES}, got {self.severity!r}"
            )

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def to_dict(self) -> dict:
        return asdict(self)


def sort_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Return issues ordered by ``(path, code)``, lexicographic ascending."""
    return sorted(issues, key=lambda issue: (issue.path, issue.code))


def has_errors(issues: Iterable[Issue]) -> bool:
    """True if any issue has ``"error"`` severity."""
    return any(issue.is_error for issue in issues)
