from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import GoalStatus, Priority, lookup
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_text, fetchall, fetchone, load_json_text
from .model import Objective, ObjectiveDraft, ProgressLogEntry
from .repository import GoalRepository

_OBJECTIVE_COLUMNS = """
    goal_id, owner_id, objective, key_result, priority, status,
    progress, duedate, category, version, created_at, updated_at
"""


class MySQLGoalRepository(GoalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_objective(r: dict) -> Objective:
        return Objective(
            goal_id=int(r["goal_id"]),
            owner_id=int(r["owner_id"]),
            objective=r["objective"],
            key_result=load_json_text(r.get("key_result")),
            priority=lookup(Priority, r.get("priority")) or Priority.MEDIUM,
            status=lookup(GoalStatus, r.get("status")) or GoalStatus.ACTIVE,
            progress=int(r.get("progress") or 0),
            duedate=r.get("duedate"),
            category=r.get("category") or "General",
            version=int(r.get("version") or 1),
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
        )

    # -------- Objectives --------
    def list_for_owner(self, owner_id: int) -> Sequence[Objective]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_OBJECTIVE_COLUMNS}
                FROM objectives
                WHERE owner_id=%s
                ORDER BY duedate IS NULL, duedate ASC, goal_id ASC
                """,
                (int(owner_id),),
            )
            return [self._to_objective(r) for r in fetchall(cur)]

    def get_by_id(self, goal_id: int) -> Optional[Objective]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_OBJECTIVE_COLUMNS} FROM objectives WHERE goal_id=%s",
                (int(goal_id),),
            )
            r = fetchone(cur)
            return self._to_objective(r) if r else None

    def create(self, *, owner_id: int, draft: ObjectiveDraft) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO objectives(
                    owner_id, objective, key_result, priority, status, progress, duedate, category
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(owner_id),
                    draft.objective,
                    dump_json_text(draft.key_result),
                    draft.priority.value,
                    draft.status.value,
                    int(draft.progress),
                    draft.duedate,
                    draft.category,
                ),
            )
            return int(cur.lastrowid)

    def replace(self, *, goal_id: int, draft: ObjectiveDraft, expected_version: Optional[int] = None) -> bool:
        clauses = ["goal_id=%s"]
        params: list[object] = [
            draft.objective,
            dump_json_text(draft.key_result),
            draft.priority.value,
            draft.status.value,
            int(draft.progress),
            draft.duedate,
            draft.category,
            int(goal_id),
        ]
        if expected_version is not None:
            clauses.append("version=%s")
            params.append(int(expected_version))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE objectives
                SET objective=%s, key_result=%s, priority=%s, status=%s,
                    progress=%s, duedate=%s, category=%s, version=version+1
                WHERE {where}
                """,
                tuple(params),
            )
            return cur.rowcount > 0

    def update_key_results(self, *, goal_id: int, key_result: list) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE objectives
                SET key_result=%s, version=version+1
                WHERE goal_id=%s
                """,
                (dump_json_text(key_result), int(goal_id)),
            )
            return cur.rowcount > 0

    def delete(self, goal_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM objectives WHERE goal_id=%s", (int(goal_id),))
            return cur.rowcount > 0

    # -------- Progress log --------
    def append_progress_log(
        self,
        *,
        goal_id: int,
        key_index: int,
        progress: int,
        noted_by: int,
        noted_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO goal_progress_logs(goal_id, key_index, progress, noted_at, noted_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(goal_id), int(key_index), int(progress), noted_at, int(noted_by)),
            )
            return int(cur.lastrowid)

    def list_progress_log(self, *, goal_id: int, limit: int) -> Sequence[ProgressLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, goal_id, key_index, progress, noted_at, noted_by
                FROM goal_progress_logs
                WHERE goal_id=%s
                ORDER BY noted_at DESC, log_id DESC
                LIMIT %s
                """,
                (int(goal_id), int(limit)),
            )
            return [
                ProgressLogEntry(
                    log_id=int(r["log_id"]),
                    goal_id=int(r["goal_id"]),
                    key_index=int(r["key_index"]),
                    progress=int(r["progress"]),
                    noted_at=r["noted_at"],
                    noted_by=int(r["noted_by"]),
                )
                for r in fetchall(cur)
            ]
