from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.goal_tracker.goal_tracker.goals.model import Objective, ObjectiveDraft, ProgressLogEntry


class InMemoryGoals:
    """GoalRepository fake. `fail_key_result_update` simulates a half-done dual write."""

    def __init__(self):
        self._objectives: dict[int, Objective] = {}
        self._logs: list[ProgressLogEntry] = []
        self._next_goal_id = 1
        self._next_log_id = 1
        self.fail_key_result_update = False

    def seed(self, **fields) -> Objective:
        gid = self._next_goal_id
        self._next_goal_id += 1
        obj = Objective(goal_id=gid, **fields)
        self._objectives[gid] = obj
        return obj

    @property
    def logs(self) -> list[ProgressLogEntry]:
        return list(self._logs)

    def list_for_owner(self, owner_id: int):
        items = [o for o in self._objectives.values() if o.owner_id == owner_id]
        items.sort(key=lambda o: (o.duedate is None, o.duedate or date.max, o.goal_id))
        return items

    def get_by_id(self, goal_id: int) -> Optional[Objective]:
        return self._objectives.get(int(goal_id))

    def create(self, *, owner_id: int, draft: ObjectiveDraft) -> int:
        obj = self.seed(
            owner_id=owner_id,
            objective=draft.objective,
            key_result=list(draft.key_result),
            priority=draft.priority,
            status=draft.status,
            progress=draft.progress,
            duedate=draft.duedate,
            category=draft.category,
        )
        return obj.goal_id

    def replace(self, *, goal_id: int, draft: ObjectiveDraft, expected_version=None) -> bool:
        cur = self._objectives.get(int(goal_id))
        if not cur:
            return False
        if expected_version is not None and cur.version != expected_version:
            return False
        self._objectives[cur.goal_id] = replace(
            cur,
            objective=draft.objective,
            key_result=list(draft.key_result),
            priority=draft.priority,
            status=draft.status,
            progress=draft.progress,
            duedate=draft.duedate,
            category=draft.category,
            version=cur.version + 1,
        )
        return True

    def update_key_results(self, *, goal_id: int, key_result: list) -> bool:
        if self.fail_key_result_update:
            raise RuntimeError("projection write failed")
        cur = self._objectives.get(int(goal_id))
        if not cur:
            return False
        self._objectives[cur.goal_id] = replace(cur, key_result=list(key_result), version=cur.version + 1)
        return True

    def delete(self, goal_id: int) -> bool:
        return self._objectives.pop(int(goal_id), None) is not None

    def append_progress_log(self, *, goal_id, key_index, progress, noted_by, noted_at) -> int:
        lid = self._next_log_id
        self._next_log_id += 1
        self._logs.append(
            ProgressLogEntry(
                log_id=lid,
                goal_id=goal_id,
                key_index=key_index,
                progress=progress,
                noted_at=noted_at,
                noted_by=noted_by,
            )
        )
        return lid

    def list_progress_log(self, *, goal_id: int, limit: int):
        items = [e for e in self._logs if e.goal_id == goal_id]
        items.sort(key=lambda e: (e.noted_at, e.log_id), reverse=True)
        return items[:limit]


@pytest.fixture
def fixed_today() -> date:
    return date(2026, 3, 10)


@pytest.fixture
def fixed_now(fixed_today) -> datetime:
    return datetime.combine(fixed_today, datetime.min.time()).replace(hour=14, minute=30)


@pytest.fixture
def goal_repo() -> InMemoryGoals:
    return InMemoryGoals()
