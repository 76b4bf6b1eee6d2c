from datetime import date, timedelta

import pytest

from src.goal_tracker.goal_tracker.core.enums import GoalStatus, Priority, ScheduleHealth
from src.goal_tracker.goal_tracker.goals.model import Objective
from src.goal_tracker.goal_tracker.goals.progress import (
    aggregate_progress,
    is_progress_editable,
    required_daily_progress_sentence,
    schedule_status,
    summarize,
)

TODAY = date(2026, 3, 10)


def make_objective(key_result, progress=0, status=GoalStatus.ACTIVE, goal_id=1):
    return Objective(
        goal_id=goal_id,
        owner_id=1,
        objective="Improve onboarding",
        key_result=key_result,
        priority=Priority.MEDIUM,
        status=status,
        progress=progress,
        duedate=TODAY + timedelta(days=30),
    )


def test_aggregate_is_mean_of_key_results():
    obj = make_objective([{"title": "a", "progress": 20}, {"title": "b", "progress": 80}])
    assert aggregate_progress(obj) == 50


def test_aggregate_empty_list_falls_back_to_top_level():
    assert aggregate_progress(make_objective([], progress=35)) == 35


def test_aggregate_bare_string_uses_top_level_progress():
    assert aggregate_progress(make_objective("Ship v1", progress=70)) == 70


def test_aggregate_none_uses_top_level_progress():
    assert aggregate_progress(make_objective(None, progress=12)) == 12


def test_aggregate_counts_legacy_strings_as_zero():
    obj = make_objective(["Write docs", {"title": "Ship code", "progress": 60}])
    assert aggregate_progress(obj) == 30


def test_aggregate_clamps_out_of_range_stored_values():
    obj = make_objective([{"title": "a", "progress": 150}, {"title": "b", "progress": -40}])
    assert aggregate_progress(obj) == 50


def test_aggregate_treats_missing_or_garbage_progress_as_zero():
    obj = make_objective([{"title": "a"}, {"title": "b", "progress": "n/a"}, {"title": "c", "progress": 90}])
    assert aggregate_progress(obj) == 30


def test_aggregate_rounds_half_up():
    obj = make_objective([{"title": "a", "progress": 0}, {"title": "b", "progress": 5}])
    assert aggregate_progress(obj) == 3


def test_aggregate_is_idempotent():
    obj = make_objective(["x", {"title": "y", "progress": 33}, {"title": "z", "progress": 67}])
    first = aggregate_progress(obj)
    assert aggregate_progress(obj) == first
    assert obj.key_result[0] == "x"


@pytest.mark.parametrize(
    "days_left, progress, expected",
    [
        (3, 85, ScheduleHealth.AT_RISK),
        (3, 95, ScheduleHealth.ON_TRACK),
        (0, 89, ScheduleHealth.AT_RISK),
        (7, 79, ScheduleHealth.AT_RISK),
        (7, 80, ScheduleHealth.ON_TRACK),
        (14, 49, ScheduleHealth.AT_RISK),
        (14, 50, ScheduleHealth.ON_TRACK),
        (15, 0, ScheduleHealth.ON_TRACK),
        (-1, 100, ScheduleHealth.COMPLETED_OVERDUE),
        (-1, 40, ScheduleHealth.OVERDUE),
    ],
)
def test_schedule_status_bands(days_left, progress, expected):
    due = TODAY + timedelta(days=days_left)
    assert schedule_status(due, progress, today=TODAY) == expected


def test_schedule_status_without_due_date():
    assert schedule_status(None, 10, today=TODAY) == ScheduleHealth.NO_DUE_DATE


def test_sentence_completed_wins_over_missing_date():
    assert required_daily_progress_sentence(None, 100, today=TODAY) == "Objective completed."


def test_sentence_no_due_date():
    assert required_daily_progress_sentence(None, 10, today=TODAY) == "No due date set."


def test_sentence_overdue_cites_remaining_percent():
    sentence = required_daily_progress_sentence(TODAY, 40, today=TODAY)
    assert sentence.startswith("Overdue")
    assert "60%" in sentence


def test_sentence_per_day_rate():
    sentence = required_daily_progress_sentence(TODAY + timedelta(days=3), 50, today=TODAY)
    assert sentence == "Needs 16.7% per day to finish in 3 days."


def test_sentence_single_day():
    sentence = required_daily_progress_sentence(TODAY + timedelta(days=1), 90, today=TODAY)
    assert sentence == "Needs 10.0% per day to finish in 1 day."


def test_progress_editable_through_due_date():
    assert is_progress_editable(TODAY, today=TODAY)
    assert is_progress_editable(TODAY + timedelta(days=1), today=TODAY)
    assert is_progress_editable(None, today=TODAY)
    assert not is_progress_editable(TODAY - timedelta(days=1), today=TODAY)


def test_summary_counts_and_average():
    items = [
        make_objective([{"title": "a", "progress": 100}], status=GoalStatus.COMPLETED, goal_id=1),
        make_objective([{"title": "a", "progress": 40}], status=GoalStatus.IN_PROGRESS, goal_id=2),
        make_objective("legacy", progress=10, status=GoalStatus.ACTIVE, goal_id=3),
    ]
    assert summarize(items) == {"total": 3, "active": 2, "completed": 1, "average_progress": 50}


def test_summary_empty():
    assert summarize([]) == {"total": 0, "active": 0, "completed": 0, "average_progress": 0}
