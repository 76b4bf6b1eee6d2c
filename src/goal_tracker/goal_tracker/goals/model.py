from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.validators import clamp_percent
from ..core.enums import GoalStatus, Priority


@dataclass(frozen=True)
class KeyResult:
    """Canonical key result. `legacy` marks elements stored as a plain title."""

    title: str
    progress: int = 0
    legacy: bool = False

    def to_stored(self) -> dict:
        return {"title": self.title, "progress": int(self.progress)}


@dataclass(frozen=True)
class Objective:
    """Domain entity: a goal with embedded, index-addressed key results.

    `key_result` keeps the stored shape untouched (None, a bare string, or a
    list mixing plain titles and {title, progress} objects). Use
    `key_results()` for the normalized view.
    """

    goal_id: int
    owner_id: int
    objective: str
    key_result: Any
    priority: Priority
    status: GoalStatus
    progress: int = 0
    duedate: Optional[date] = None
    category: str = "General"
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_key_result_list(self) -> bool:
        return isinstance(self.key_result, list)

    def key_results(self) -> list[KeyResult]:
        return normalize_key_results(self.key_result)


@dataclass(frozen=True)
class ProgressLogEntry:
    """Append-only audit row for one key-result progress update."""

    log_id: int
    goal_id: int
    key_index: int
    progress: int
    noted_at: datetime
    noted_by: int


@dataclass(frozen=True)
class ObjectiveDraft:
    """Validated field set for create and full-replace edits."""

    objective: str
    key_result: list = field(default_factory=list)
    priority: Priority = Priority.MEDIUM
    status: GoalStatus = GoalStatus.ACTIVE
    progress: int = 0
    duedate: Optional[date] = None
    category: str = "General"


def normalize_key_result(item: Any) -> KeyResult:
    if isinstance(item, dict):
        return KeyResult(
            title=str(item.get("title") or ""),
            progress=clamp_percent(item.get("progress", 0)),
        )
    if isinstance(item, str):
        return KeyResult(title=item, progress=0, legacy=True)
    return KeyResult(title="" if item is None else str(item), progress=0, legacy=True)


def normalize_key_results(raw: Any) -> list[KeyResult]:
    """Read-time migration of the stored shape into canonical key results.

    Only a list carries key results; a bare string or None yields [] and the
    objective's top-level progress stays authoritative.
    """
    if not isinstance(raw, list):
        return []
    return [normalize_key_result(item) for item in raw]


def with_key_result_progress(raw: Sequence[Any], key_index: int, progress: int) -> list:
    """Copy of the stored list with one element's progress replaced.

    An object element keeps all of its other fields. A plain-title element is
    converted to {title, progress} on its first update. Every other element
    keeps its stored shape.
    """
    updated = list(raw)
    item = updated[key_index]
    if isinstance(item, dict):
        updated[key_index] = {**item, "progress": clamp_percent(progress)}
    else:
        current = normalize_key_result(item)
        updated[key_index] = {"title": current.title, "progress": clamp_percent(progress)}
    return updated
