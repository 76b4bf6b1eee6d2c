"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the goal rules live in GoalService.
"""

import importlib

from config import get_settings_module

from src.goal_tracker.goal_tracker.container import build_container
from src.goal_tracker.goal_tracker.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    print(container.goal_service.list_view(current_user_id=1, current_role=Role.STAFF))


if __name__ == "__main__":
    main()
