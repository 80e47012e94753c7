import copy

import pytest

from riglite.json_utils import merge, merge_inplace


def test_merge_combines_disjoint_keys():
    assert merge({"a": 1}, {"b": 2}) == {"a": 1, "b": 2}


def test_merge_right_side_wins_on_conflict():
    result = merge({"foo": "bar", "keep": True}, {"foo": "baz"})
    assert result["foo"] == "baz"
    assert result["keep"] is True


def test_merge_does_not_modify_inputs():
    a = {"x": [1, 2], "y": {"z": 3}}
    b = {"y": "replaced", "w": None}
    a_before, b_before = copy.deepcopy(a), copy.deepcopy(b)
    merge(a, b)
    assert a == a_before
    assert b == b_before


def test_merge_is_shallow():
    result = merge({"nested": {"a": 1}}, {"nested": {"b": 2}})
    assert result["nested"] == {"b": 2}


@pytest.mark.parametrize(
    "a, b",
    [
        ({"a": 1}, [1, 2]),
        ({"a": 1}, "text"),
        ([1, 2], {"a": 1}),
        ("text", {"a": 1}),
        (None, {"a": 1}),
        (5, 6),
    ],
)
def test_merge_returns_left_when_not_both_objects(a, b):
    assert merge(a, b) == a


def test_merge_with_empty_right_equals_left():
    left = {"k": "v", "n": 7}
    assert merge(left, {}) == left


def test_merge_with_empty_left_equals_right():
    right = {"k": "v", "n": 7}
    assert merge({}, right) == right


def test_merge_inplace_updates_left():
    a = {"a": 1, "b": 2}
    merge_inplace(a, {"b": 3, "c": 4})
    assert a == {"a": 1, "b": 3, "c": 4}


def test_merge_inplace_returns_none():
    a = {"a": 1}
    assert merge_inplace(a, {"b": 2}) is None
    assert a == {"a": 1, "b": 2}


def test_merge_inplace_ignores_non_objects():
    a = {"a": 1}
    merge_inplace(a, [("b", 2)])
    assert a == {"a": 1}

    items = [1, 2]
    merge_inplace(items, {"a": 1})
    assert items == [1, 2]


def test_merge_inplace_agrees_with_merge():
    a = {"p": 1, "q": 2}
    b = {"q": 20, "r": 30}
    expected = merge(a, b)
    merge_inplace(a, b)
    assert a == expected