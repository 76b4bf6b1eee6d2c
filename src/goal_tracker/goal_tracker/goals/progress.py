"""Derived views over an objective's current state.

Everything here is a pure function of its arguments: no repository access,
no progress-log lookups, and `today` is always passed in.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import days_until
from ..common.validators import clamp_percent, round_half_up
from ..core.constants import RISK_BANDS
from ..core.enums import GoalStatus, ScheduleHealth
from .model import Objective, normalize_key_results


def aggregate_progress(objective: Objective) -> int:
    """Equal-weight mean of key-result progress, rounded half-up.

    Falls back to the top-level progress when key results are not a list
    (legacy bare string, None) or the list is empty.
    """
    if not objective.has_key_result_list:
        return clamp_percent(objective.progress or 0)

    values = [kr.progress for kr in normalize_key_results(objective.key_result)]
    if not values:
        return clamp_percent(objective.progress or 0)
    return round_half_up(sum(values) / len(values))


def schedule_status(duedate: Optional[date], progress: int, *, today: date) -> ScheduleHealth:
    if duedate is None:
        return ScheduleHealth.NO_DUE_DATE

    days_left = days_until(duedate, today)
    if days_left < 0:
        if progress >= 100:
            return ScheduleHealth.COMPLETED_OVERDUE
        return ScheduleHealth.OVERDUE

    for max_days, min_progress in RISK_BANDS:
        if days_left <= max_days and progress < min_progress:
            return ScheduleHealth.AT_RISK
    return ScheduleHealth.ON_TRACK


def required_daily_progress_sentence(duedate: Optional[date], progress: int, *, today: date) -> str:
    if progress >= 100:
        return "Objective completed."
    if duedate is None:
        return "No due date set."

    remaining = 100 - progress
    days_left = days_until(duedate, today)
    if days_left <= 0:
        return f"Overdue: {remaining}% of the objective is still remaining."

    per_day = remaining / days_left
    unit = "day" if days_left == 1 else "days"
    return f"Needs {per_day:.1f}% per day to finish in {days_left} {unit}."


def is_progress_editable(duedate: Optional[date], *, today: date) -> bool:
    """Progress logging stays open through the due date itself."""
    return duedate is None or duedate >= today


def summarize(objectives: Iterable[Objective]) -> dict:
    items = list(objectives)
    open_states = {GoalStatus.ACTIVE, GoalStatus.IN_PROGRESS}

    if items:
        average = round_half_up(sum(aggregate_progress(o) for o in items) / len(items))
    else:
        average = 0

    return {
        "total": len(items),
        "active": sum(1 for o in items if o.status in open_states),
        "completed": sum(1 for o in items if o.status == GoalStatus.COMPLETED),
        "average_progress": average,
    }
