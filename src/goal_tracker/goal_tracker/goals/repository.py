from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Objective, ObjectiveDraft, ProgressLogEntry


class GoalRepository(Protocol):
    # Objectives
    def list_for_owner(self, owner_id: int) -> Sequence[Objective]:
        """Objectives of one owner, due date ascending (undated last), then id."""

        raise NotImplementedError

    def get_by_id(self, goal_id: int) -> Optional[Objective]:
        raise NotImplementedError

    def create(self, *, owner_id: int, draft: ObjectiveDraft) -> int:
        raise NotImplementedError

    def replace(self, *, goal_id: int, draft: ObjectiveDraft, expected_version: Optional[int] = None) -> bool:
        """Full-record replace; bumps version.

        With expected_version set, only a row still at that version is
        updated. Returns False when no row matched.
        """

        raise NotImplementedError

    def update_key_results(self, *, goal_id: int, key_result: list) -> bool:
        raise NotImplementedError

    def delete(self, goal_id: int) -> bool:
        raise NotImplementedError

    # Progress log
    def append_progress_log(
        self,
        *,
        goal_id: int,
        key_index: int,
        progress: int,
        noted_by: int,
        noted_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_progress_log(self, *, goal_id: int, limit: int) -> Sequence[ProgressLogEntry]:
        """Most recent first."""

        raise NotImplementedError
