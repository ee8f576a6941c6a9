"""Tests for the owner-scoped record store."""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.errors import NotFound, StoreError
from app.models import MOVABLE_PRIORITIES, Priority, Status


def test_list_members_in_registration_order(store, owner, make_members):
    make_members(("B", 1), ("A", 2), ("C", 3))

    assert [m.name for m in store.list_members(owner.id)] == ["B", "A", "C"]


def test_todo_tasks_by_member_sorted_low_first(store, owner, make_members, add_tasks):
    alice, = make_members(("Alice", 5))
    medium, high, low = add_tasks(alice, "Medium", "High", "Low")
    add_tasks(alice, "Low", status=Status.DONE)

    tasks = store.list_todo_tasks_by_member(owner.id, alice.id, MOVABLE_PRIORITIES)

    assert [t.id for t in tasks] == [low.id, medium.id]


def test_count_todo_tasks(store, owner, make_members, add_tasks):
    alice, = make_members(("Alice", 5))
    add_tasks(alice, "Low", "High")
    add_tasks(alice, "Low", status=Status.DONE)

    assert store.count_todo_tasks(owner.id, alice.id) == 2


def test_delete_member_unassigns_tasks(store, owner, make_members, add_tasks):
    alice, bob = make_members(("Alice", 5), ("Bob", 5))
    alice_tasks = add_tasks(alice, "Low", "High")
    bob_task, = add_tasks(bob, "Medium")

    assert store.delete_member(owner.id, alice.id) == 2

    for task in alice_tasks:
        assert store.get_task(owner.id, task.id).assigned_member_id is None
    assert store.get_task(owner.id, bob_task.id).assigned_member_id == bob.id
    assert [m.name for m in store.list_members(owner.id)] == ["Bob"]


def test_other_owners_records_are_invisible(store, owner, other_owner, make_members, add_tasks):
    theirs, = make_members(("Theirs", 3), owner_id=other_owner.id)
    their_task, = add_tasks(theirs, "Low", owner_id=other_owner.id)

    with pytest.raises(NotFound, match="Member not found"):
        store.get_member(owner.id, theirs.id)
    with pytest.raises(NotFound, match="Task not found"):
        store.get_task(owner.id, their_task.id)
    with pytest.raises(NotFound):
        store.delete_task(owner.id, their_task.id)
    assert store.list_tasks(owner.id) == []


def test_cannot_assign_to_another_owners_member(store, owner, other_owner, make_members, add_tasks):
    mine, = make_members(("Mine", 3))
    theirs, = make_members(("Theirs", 3), owner_id=other_owner.id)
    task, = add_tasks(mine, "Low")

    with pytest.raises(NotFound):
        store.update_task_assignment(task.id, owner.id, theirs.id)
    with pytest.raises(NotFound):
        store.create_task(owner.id, "Sneaky", theirs.id)

    assert store.get_task(owner.id, task.id).assigned_member_id == mine.id


def test_list_tasks_newest_first_with_filters(store, owner, make_members, add_tasks):
    alice, bob = make_members(("Alice", 5), ("Bob", 5))
    first, = add_tasks(alice, "Low")
    second, = add_tasks(bob, "High")
    done, = add_tasks(alice, "Medium", status=Status.DONE)

    assert [t.id for t in store.list_tasks(owner.id)] == [done.id, second.id, first.id]
    assert [t.id for t in store.list_tasks(owner.id, status=Status.TODO)] == [second.id, first.id]
    assert [t.id for t in store.list_tasks(owner.id, member_id=alice.id)] == [done.id, first.id]
    assert store.count_tasks(owner.id) == 3
    assert store.count_tasks(owner.id, Status.DONE) == 1


def test_update_task_fields(store, owner, make_members, add_tasks):
    alice, = make_members(("Alice", 5))
    task, = add_tasks(alice, "Low")

    updated = store.update_task(
        owner.id, task.id, title="Renamed", priority=Priority.HIGH,
        status=Status.DONE, assigned_member_id=None,
    )

    assert updated.title == "Renamed"
    assert updated.priority == "High"
    assert updated.status == "Done"
    assert updated.assigned_member_id is None


def test_driver_errors_become_store_errors(store, owner, db):
    error = OperationalError("SELECT", {}, Exception("database is locked"))
    with patch.object(db, "query", side_effect=error):
        with pytest.raises(StoreError, match="database is locked"):
            store.list_members(owner.id)
