from datetime import date, datetime

import pytest

from src.goal_tracker.goal_tracker.common.datetime_utils import days_until, parse_optional_date
from src.goal_tracker.goal_tracker.common.validators import clamp_percent, require_non_empty, require_percent
from src.goal_tracker.goal_tracker.core.exceptions import ValidationError


@pytest.mark.parametrize("value, expected", [(-10, 0), (150, 100), (49.5, 50), ("80", 80), (None, 0), ("abc", 0)])
def test_clamp_percent(value, expected):
    assert clamp_percent(value) == expected


@pytest.mark.parametrize("value", [None, "", "x", True, float("nan")])
def test_require_percent_rejects_non_numbers(value):
    with pytest.raises(ValidationError):
        require_percent(value, "Progress")


def test_require_non_empty_strips():
    assert require_non_empty("  Launch  ", "Objective") == "Launch"
    with pytest.raises(ValidationError):
        require_non_empty("   ", "Objective")


def test_parse_optional_date_accepts_timestamps_and_blank():
    assert parse_optional_date("2026-03-11T00:00:00.000Z") == date(2026, 3, 11)
    assert parse_optional_date(datetime(2026, 3, 11, 23, 59)) == date(2026, 3, 11)
    assert parse_optional_date("  ") is None


def test_days_until_ignores_time_of_day():
    due = parse_optional_date(datetime(2026, 3, 12, 8, 0))
    today = parse_optional_date(datetime(2026, 3, 10, 23, 59))
    assert days_until(due, today) == 2
