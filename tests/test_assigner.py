"""Tests for the auto-assigner."""
import pytest

from app.assigner import AutoAssigner, pick_least_loaded
from app.errors import NoMembersAvailable
from app.workload import WorkloadCalculator


@pytest.fixture
def assigner(store):
    return AutoAssigner(WorkloadCalculator(store))


def test_picks_member_with_lowest_workload(assigner, owner, make_members, add_tasks):
    a, b, c = make_members(("A", 3), ("B", 3), ("C", 3))
    add_tasks(a, "Low", "Low")
    add_tasks(b, "Low", "Low")
    add_tasks(c, "Low")

    choice = assigner.select_member_for_new_task(owner.id)

    assert choice.member.id == c.id
    assert choice.workload == 1


def test_tie_goes_to_first_registered(assigner, owner, make_members, add_tasks):
    a, b = make_members(("A", 3), ("B", 3))
    add_tasks(a, "Low")
    add_tasks(b, "Medium")

    assert assigner.select_member_for_new_task(owner.id).member.id == a.id


def test_full_member_is_still_suggested(assigner, owner, make_members, add_tasks):
    solo, = make_members(("Solo", 3))
    add_tasks(solo, "Low", "Medium", "High")

    choice = assigner.select_member_for_new_task(owner.id)

    assert choice.member.id == solo.id
    assert choice.at_or_over_capacity


def test_capacity_is_not_consulted(assigner, owner, make_members, add_tasks):
    # Zero-capacity member with no tasks still has the lowest workload
    idle, busy = make_members(("Idle", 0), ("Busy", 5))
    add_tasks(busy, "Low")

    choice = assigner.select_member_for_new_task(owner.id)

    assert choice.member.id == idle.id
    assert choice.at_or_over_capacity


def test_no_members_raises(assigner, owner):
    with pytest.raises(NoMembersAvailable):
        assigner.select_member_for_new_task(owner.id)


def test_pick_least_loaded_on_empty_sequence():
    with pytest.raises(NoMembersAvailable, match="No members available"):
        pick_least_loaded([])


def test_suggestion_does_not_write(assigner, store, owner, make_members, add_tasks):
    a, = make_members(("A", 3))
    unassigned, = add_tasks(None, "Low")

    assigner.select_member_for_new_task(owner.id)

    assert store.get_task(owner.id, unassigned.id).assigned_member_id is None
