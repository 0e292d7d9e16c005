"""Tests for recursive parameter merging."""

from __future__ import annotations

from src.outbound.merge import deep_merge


def test_scalars_are_overwritten() -> None:
    assert deep_merge({"to": "a", "x": 1}, {"to": "b"}) == {"to": "b", "x": 1}


def test_lists_are_concatenated() -> None:
    merged = deep_merge({"tags": ["a"]}, {"tags": ["b", "c"]})
    assert merged["tags"] == ["a", "b", "c"]


def test_nested_dicts_merge() -> None:
    merged = deep_merge(
        {"context": {"message_id": "m1", "extra": True}},
        {"context": {"message_id": "m2"}},
    )
    assert merged == {"context": {"message_id": "m2", "extra": True}}


def test_inputs_are_not_mutated() -> None:
    base = {"items": [1], "nested": {"k": "v"}}
    override = {"items": [2], "nested": {"k": "w"}}
    deep_merge(base, override)
    assert base == {"items": [1], "nested": {"k": "v"}}
    assert override == {"items": [2], "nested": {"k": "w"}}


def test_type_mismatch_overrides() -> None:
    assert deep_merge({"a": [1]}, {"a": "x"}) == {"a": "x"}
