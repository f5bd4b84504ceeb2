from __future__ import annotations

import pytest

from pendencias_mob.models.filter_state import ColumnSelection, FilterState


def test_unrestricted_accepts_everything():
    sel = ColumnSelection.unrestricted()
    assert sel.is_unrestricted
    assert not sel.constrains_rows
    assert sel.accepts("anything")


def test_empty_restriction_does_not_constrain_rows():
    sel = ColumnSelection.restricted_to([])
    assert not sel.is_unrestricted
    assert not sel.constrains_rows
    assert sel.accepts("x")


def test_restricted_accepts_members_only():
    sel = ColumnSelection.restricted_to(["a", "b"])
    assert sel.accepts("a")
    assert not sel.accepts("c")


def test_toggle_from_unrestricted_starts_a_selection():
    assert ColumnSelection.unrestricted().toggled("a").values == frozenset({"a"})


def test_toggle_is_symmetric():
    sel = ColumnSelection.restricted_to(["a"]).toggled("b").toggled("a")
    assert sel.values == frozenset({"b"})


def test_state_defaults_every_column_to_unrestricted():
    state = FilterState.empty(["A", "B"])
    assert set(state.selections) == {"A", "B"}
    assert state.constrained_columns() == []


def test_with_selection_returns_new_state():
    state = FilterState.empty(["A", "B"])
    new = state.with_selection("A", ColumnSelection.restricted_to(["x"]))
    assert new is not state
    assert new.constrained_columns() == ["A"]
    assert state.selection("A").is_unrestricted


def test_unknown_column():
    state = FilterState.empty(["A"])
    with pytest.raises(KeyError):
        state.with_selection("Z", ColumnSelection.unrestricted())
    with pytest.raises(KeyError):
        FilterState(columns=("A",), selections={"Z": ColumnSelection.unrestricted()})
