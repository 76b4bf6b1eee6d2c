from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of the authenticated principal."""

    ADMIN = "admin"
    STAFF = "staff"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class GoalStatus(str, Enum):
    """Operator-set lifecycle state. Never derived from progress."""

    ACTIVE = "Active"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class ScheduleHealth(str, Enum):
    """Derived classification, not stored."""

    NO_DUE_DATE = "No Due Date"
    ON_TRACK = "On Track"
    AT_RISK = "At Risk"
    OVERDUE = "Overdue"
    COMPLETED_OVERDUE = "Completed (Overdue)"


def lookup(enum_cls, value):
    """Case-insensitive match on the enum value; None when nothing matches."""
    if isinstance(value, enum_cls):
        return value
    v = str(value or "").strip().lower()
    for member in enum_cls:
        if member.value.lower() == v:
            return member
    return None
