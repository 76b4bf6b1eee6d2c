from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import Clock, now_local, parse_optional_date, today_local
from ..common.validators import require_non_empty, require_percent
from ..core.constants import DEFAULT_CATEGORY, DEFAULT_PROGRESS_LOG_LIMIT, MAX_PROGRESS_LOG_LIMIT
from ..core.enums import GoalStatus, Priority, Role, lookup
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    LockedForEditingError,
    NotFoundError,
    ValidationError,
)
from .model import KeyResult, Objective, ObjectiveDraft, ProgressLogEntry, with_key_result_progress
from .progress import (
    aggregate_progress,
    is_progress_editable,
    required_daily_progress_sentence,
    schedule_status,
    summarize,
)
from .repository import GoalRepository


@dataclass(frozen=True)
class ProgressUpdate:
    log_id: int
    objective: Objective


class GoalService:
    """Use cases over objectives, key results and the progress log."""

    def __init__(
        self,
        goals: GoalRepository,
        *,
        clock: Optional[Clock] = None,
        progress_log_limit: int = DEFAULT_PROGRESS_LOG_LIMIT,
    ):
        self._goals = goals
        self._clock = clock or today_local
        self._progress_log_limit = int(progress_log_limit)

    # -------- Parsing helpers --------
    @staticmethod
    def _parse_priority(value: Any) -> Priority:
        priority = lookup(Priority, value)
        if priority is not None:
            return priority
        raise ValidationError("Priority must be one of Low, Medium, High")

    @staticmethod
    def _parse_status(value: Any) -> GoalStatus:
        status = lookup(GoalStatus, value)
        if status is not None:
            return status
        raise ValidationError("Status must be one of Active, In Progress, Completed")

    @staticmethod
    def _parse_duedate(value: Any) -> date:
        try:
            duedate = parse_optional_date(value)
        except ValueError:
            raise ValidationError("Due date must be a YYYY-MM-DD date")
        if duedate is None:
            raise ValidationError("Due date is required")
        return duedate

    @staticmethod
    def _title_of(item: Any) -> str:
        if isinstance(item, KeyResult):
            return item.title
        if isinstance(item, dict):
            return item.get("title") or ""
        return item if isinstance(item, str) else ""

    def _new_key_results(self, items: Optional[Sequence[Any]]) -> list:
        if not items or isinstance(items, str):
            raise ValidationError("At least one key result is required")
        titles = [require_non_empty(self._title_of(item), "Key result title") for item in items]
        return [KeyResult(title=t).to_stored() for t in titles]

    def _edited_key_results(self, items: Optional[Sequence[Any]]) -> list:
        if not items or isinstance(items, str):
            raise ValidationError("At least one key result is required")

        out = []
        for item in items:
            title = require_non_empty(self._title_of(item), "Key result title")
            if isinstance(item, KeyResult):
                raw_progress = item.progress
            elif isinstance(item, dict):
                raw_progress = item.get("progress")
            else:
                raw_progress = 0
            if raw_progress is None:
                raw_progress = 0
            out.append({"title": title, "progress": require_percent(raw_progress, "Key result progress")})
        return out

    # -------- Access --------
    def _today(self, today: Optional[date]) -> date:
        return today or self._clock()

    def _get_accessible(self, *, goal_id: int, current_user_id: int, current_role: Role) -> Objective:
        obj = self._goals.get_by_id(int(goal_id))
        if not obj:
            raise NotFoundError("Objective not found")
        if current_role != Role.ADMIN and obj.owner_id != int(current_user_id):
            raise AuthorizationError("You do not have access to this objective")
        return obj

    # -------- Queries --------
    def list_objectives(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        owner_id: Optional[int] = None,
    ) -> Sequence[Objective]:
        target = int(current_user_id) if owner_id is None else int(owner_id)
        if target != int(current_user_id) and current_role != Role.ADMIN:
            raise AuthorizationError("You can only list your own objectives")
        return self._goals.list_for_owner(target)

    def get_objective(self, *, current_user_id: int, current_role: Role, goal_id: int) -> Objective:
        return self._get_accessible(goal_id=goal_id, current_user_id=current_user_id, current_role=current_role)

    def get_progress_log(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        goal_id: int,
        limit: Optional[int] = None,
    ) -> Sequence[ProgressLogEntry]:
        self._get_accessible(goal_id=goal_id, current_user_id=current_user_id, current_role=current_role)
        n = self._progress_log_limit if limit is None else int(limit)
        if n <= 0:
            raise ValidationError("Limit must be positive")
        return self._goals.list_progress_log(goal_id=int(goal_id), limit=min(n, MAX_PROGRESS_LOG_LIMIT))

    # -------- Commands --------
    def create_objective(
        self,
        *,
        current_user_id: int,
        objective: str,
        key_results: Sequence[Any],
        duedate: Any,
        priority: Any = Priority.MEDIUM,
        category: str = "",
    ) -> int:
        title = require_non_empty(objective, "Objective")
        due = self._parse_duedate(duedate)
        key_result = self._new_key_results(key_results)

        draft = ObjectiveDraft(
            objective=title,
            key_result=key_result,
            priority=self._parse_priority(priority),
            status=GoalStatus.ACTIVE,
            progress=0,
            duedate=due,
            category=(category or "").strip() or DEFAULT_CATEGORY,
        )
        return self._goals.create(owner_id=int(current_user_id), draft=draft)

    def edit_objective(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        goal_id: int,
        objective: str,
        key_results: Sequence[Any],
        priority: Any,
        status: Any,
        duedate: Any,
        category: str,
        progress: Any,
        expected_version: Optional[int] = None,
    ) -> Objective:
        """Full-record replace. No progress-log entry is written."""

        self._get_accessible(goal_id=goal_id, current_user_id=current_user_id, current_role=current_role)

        draft = ObjectiveDraft(
            objective=require_non_empty(objective, "Objective"),
            key_result=self._edited_key_results(key_results),
            priority=self._parse_priority(priority),
            status=self._parse_status(status),
            progress=require_percent(progress, "Progress"),
            duedate=self._parse_duedate(duedate),
            category=(category or "").strip() or DEFAULT_CATEGORY,
        )

        ok = self._goals.replace(goal_id=int(goal_id), draft=draft, expected_version=expected_version)
        if not ok:
            if expected_version is not None and self._goals.get_by_id(int(goal_id)):
                raise ConflictError("Objective was changed by someone else; reload and retry")
            raise NotFoundError("Objective not found")

        updated = self._goals.get_by_id(int(goal_id))
        if not updated:
            raise NotFoundError("Objective not found")
        return updated

    def log_progress(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        goal_id: int,
        key_index: int,
        progress: Any,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> ProgressUpdate:
        """Append a log entry, then write the new value into the key result.

        The two writes are separate; a failure in the second leaves the log
        entry in place.
        """

        value = require_percent(progress, "Progress")
        obj = self._get_accessible(goal_id=goal_id, current_user_id=current_user_id, current_role=current_role)

        if not obj.has_key_result_list:
            raise ValidationError("Objective has no key results to update")
        if isinstance(key_index, bool) or not isinstance(key_index, int):
            raise ValidationError("Key result index must be an integer")
        if key_index < 0 or key_index >= len(obj.key_result):
            raise ValidationError("Key result index out of range")

        if not is_progress_editable(obj.duedate, today=self._today(today)):
            raise LockedForEditingError("Progress is locked: the objective's due date has passed")

        log_id = self._goals.append_progress_log(
            goal_id=obj.goal_id,
            key_index=key_index,
            progress=value,
            noted_by=int(current_user_id),
            noted_at=now or now_local(),
        )

        new_key_result = with_key_result_progress(obj.key_result, key_index, value)
        if not self._goals.update_key_results(goal_id=obj.goal_id, key_result=new_key_result):
            raise NotFoundError("Objective not found")

        updated = self._goals.get_by_id(obj.goal_id)
        if not updated:
            raise NotFoundError("Objective not found")
        return ProgressUpdate(log_id=log_id, objective=updated)

    def delete_objective(self, *, current_user_id: int, current_role: Role, goal_id: int) -> None:
        self._get_accessible(goal_id=goal_id, current_user_id=current_user_id, current_role=current_role)
        if not self._goals.delete(int(goal_id)):
            raise NotFoundError("Objective not found")

    # -------- Views --------
    def summary(self, objectives: Iterable[Objective]) -> dict:
        return summarize(objectives)

    def to_view(self, obj: Objective, *, today: Optional[date] = None) -> dict:
        day = self._today(today)
        overall = aggregate_progress(obj)
        return {
            "goal_id": obj.goal_id,
            "owner_id": obj.owner_id,
            "objective": obj.objective,
            "key_result": obj.key_result,
            "key_results": [{"title": kr.title, "progress": kr.progress} for kr in obj.key_results()],
            "priority": obj.priority.value,
            "status": obj.status.value,
            "progress": obj.progress,
            "duedate": obj.duedate.isoformat() if obj.duedate else None,
            "category": obj.category,
            "version": obj.version,
            "aggregate_progress": overall,
            "schedule_status": schedule_status(obj.duedate, overall, today=day).value,
            "required_daily_progress": required_daily_progress_sentence(obj.duedate, overall, today=day),
            "progress_editable": is_progress_editable(obj.duedate, today=day),
        }

    @staticmethod
    def log_entry_view(entry: ProgressLogEntry) -> dict:
        return {
            "log_id": entry.log_id,
            "goal_id": entry.goal_id,
            "key_index": entry.key_index,
            "progress": entry.progress,
            "noted_at": entry.noted_at.strftime("%Y-%m-%d %H:%M"),
            "noted_by": entry.noted_by,
        }

    def list_view(self, *, current_user_id: int, current_role: Role, owner_id: Optional[int] = None) -> dict:
        objectives = self.list_objectives(current_user_id=current_user_id, current_role=current_role, owner_id=owner_id)
        today = self._today(None)
        return {
            "objectives": [self.to_view(o, today=today) for o in objectives],
            "summary": self.summary(objectives),
        }
