from src.goal_tracker.goal_tracker.goals.model import KeyResult, normalize_key_results, with_key_result_progress


def test_normalize_mixed_list():
    raw = ["Write docs", {"title": "Ship code", "progress": 60}]
    assert normalize_key_results(raw) == [
        KeyResult(title="Write docs", progress=0, legacy=True),
        KeyResult(title="Ship code", progress=60),
    ]


def test_normalize_non_list_shapes_yield_nothing():
    assert normalize_key_results("Ship v1") == []
    assert normalize_key_results(None) == []


def test_normalize_does_not_touch_stored_list():
    raw = ["a", {"title": "b"}]
    normalize_key_results(raw)
    assert raw == ["a", {"title": "b"}]


def test_update_converts_legacy_element_and_keeps_title():
    raw = ["Write docs", "Ship code"]
    updated = with_key_result_progress(raw, 1, 60)
    assert updated == ["Write docs", {"title": "Ship code", "progress": 60}]
    assert raw == ["Write docs", "Ship code"]


def test_update_clamps_value():
    assert with_key_result_progress([{"title": "a", "progress": 10}], 0, 150) == [{"title": "a", "progress": 100}]


def test_update_keeps_extra_fields_of_object_element():
    raw = [{"title": "Ship", "progress": 10, "owner": "ana", "note": "q3"}, "Docs"]
    updated = with_key_result_progress(raw, 0, 50)
    assert updated == [{"title": "Ship", "progress": 50, "owner": "ana", "note": "q3"}, "Docs"]
    assert raw[0]["progress"] == 10
