from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_PROGRESS_LOG_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .goals.mysql_goal_repository import MySQLGoalRepository
from .goals.service import GoalService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    goals_repo: MySQLGoalRepository

    goal_service: GoalService


def build_container(*, db_config: dict, progress_log_limit: int = DEFAULT_PROGRESS_LOG_LIMIT) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    goals_repo = MySQLGoalRepository(conn)
    goal_service = GoalService(goals_repo, progress_log_limit=progress_log_limit)

    return Container(
        conn=conn,
        goals_repo=goals_repo,
        goal_service=goal_service,
    )
