"""Tests for the workload rule and WorkloadCalculator."""
from types import SimpleNamespace
from unittest.mock import patch

from app.models import Status
from app.workload import WorkloadCalculator, count_open_tasks


def _task(member_id, status):
    return SimpleNamespace(assigned_member_id=member_id, status=status)


def test_count_open_tasks_ignores_done_and_other_members():
    tasks = [
        _task(1, "Todo"),
        _task(1, "Todo"),
        _task(1, "Done"),
        _task(2, "Todo"),
        _task(None, "Todo"),
    ]
    assert count_open_tasks(tasks, 1) == 2
    assert count_open_tasks(tasks, 2) == 1
    assert count_open_tasks(tasks, 3) == 0


def test_workload_counts_only_todo_tasks(store, owner, make_members, add_tasks):
    alice, = make_members(("Alice", 3))
    add_tasks(alice, "Low", "High")
    add_tasks(alice, "Medium", status=Status.DONE)

    assert WorkloadCalculator(store).workload_of(owner.id, alice.id) == 2


def test_completing_a_task_decrements_only_its_member(store, owner, make_members, add_tasks):
    alice, bob = make_members(("Alice", 3), ("Bob", 3))
    task, _ = add_tasks(alice, "Low", "Low")
    add_tasks(bob, "Medium")
    calculator = WorkloadCalculator(store)

    store.update_task(owner.id, task.id, status=Status.DONE)

    assert calculator.workload_of(owner.id, alice.id) == 1
    assert calculator.workload_of(owner.id, bob.id) == 1


def test_members_with_workload_keeps_registration_order(store, owner, make_members, add_tasks):
    first, second, third = make_members(("First", 1), ("Second", 1), ("Third", 1))
    add_tasks(first, "Low", "Low", "Low")
    add_tasks(third, "Low")

    entries = WorkloadCalculator(store).members_with_workload(owner.id)

    assert [e.member.name for e in entries] == ["First", "Second", "Third"]
    assert [e.workload for e in entries] == [3, 0, 1]
    assert [e.load_state for e in entries] == ["over", "under", "at"]


def test_members_with_workload_is_scoped_by_owner(store, owner, other_owner, make_members):
    make_members(("Mine", 2))
    make_members(("Theirs", 2), owner_id=other_owner.id)

    entries = WorkloadCalculator(store).members_with_workload(owner.id)

    assert [e.member.name for e in entries] == ["Mine"]


def test_workload_is_not_cached(store, owner, make_members, add_tasks):
    alice, = make_members(("Alice", 3))
    calculator = WorkloadCalculator(store)
    assert calculator.workload_of(owner.id, alice.id) == 0

    add_tasks(alice, "Low")

    assert calculator.workload_of(owner.id, alice.id) == 1


def test_members_with_workload_applies_rule_to_one_task_fetch(
    store, owner, make_members, add_tasks
):
    alice, bob = make_members(("Alice", 2), ("Bob", 2))
    add_tasks(alice, "Low", "Medium")
    add_tasks(bob, "High", status=Status.DONE)
    calculator = WorkloadCalculator(store)

    with patch.object(store, "list_tasks", wraps=store.list_tasks) as list_tasks, \
            patch("app.workload.count_open_tasks", wraps=count_open_tasks) as rule:
        entries = calculator.members_with_workload(owner.id)

    assert list_tasks.call_count == 1
    assert [c.args[1] for c in rule.call_args_list] == [alice.id, bob.id]
    assert [e.workload for e in entries] == [2, 0]
