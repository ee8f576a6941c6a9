"""
Team service: member and task management for one owner.

Validation lives here; the record store trusts its inputs apart from
ownership. All methods return a Result.
"""
from dataclasses import dataclass
from typing import List, Optional

from app.errors import BalancerError, ValidationError
from app.logger import get_logger
from app.models import MAX_CAPACITY, MIN_CAPACITY, Member, Priority, Status, Task
from app.result import Result, STORE_ERROR
from app.store import RecordStore
from app.workload import MemberWorkload, WorkloadCalculator

logger = get_logger(__name__)

_UNSET = object()


@dataclass
class TaskWrite:
    """A created or updated task plus the overload warning, if any."""
    task: Task
    capacity_warning: Optional[str] = None


@dataclass
class DashboardStats:
    total_tasks: int
    todo_tasks: int
    done_tasks: int
    member_count: int
    overloaded_members: int

    def to_dict(self) -> dict:
        return {
            "total_tasks": self.total_tasks,
            "todo_tasks": self.todo_tasks,
            "done_tasks": self.done_tasks,
            "member_count": self.member_count,
            "overloaded_members": self.overloaded_members,
        }


def validate_member_fields(name: Optional[str], capacity) -> str:
    """Return the trimmed name or raise ValidationError."""
    if isinstance(capacity, bool) or not isinstance(capacity, int) \
            or capacity < MIN_CAPACITY or capacity > MAX_CAPACITY:
        raise ValidationError(f"Capacity must be between {MIN_CAPACITY} and {MAX_CAPACITY}")
    if not name or not name.strip():
        raise ValidationError("Name is required")
    return name.strip()


def validate_title(title: Optional[str]) -> str:
    if not title or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()


def _parse_enum(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(v.value for v in enum_cls)
        raise ValidationError(f"{label} must be one of: {allowed}")


class TeamService:

    def __init__(self, store: RecordStore):
        self.store = store
        self.calculator = WorkloadCalculator(store)

    def _run(self, action: str, fn) -> Result:
        try:
            return Result.ok(fn())
        except BalancerError as e:
            return Result.fail(e.message, code=e.code)
        except Exception as e:
            logger.exception(f"Unexpected error: failed to {action}")
            return Result.fail(f"Failed to {action}: {e}", code=STORE_ERROR)

    def _capacity_warning(self, owner_id: int, member_id: Optional[int]) -> Optional[str]:
        if member_id is None:
            return None
        member = self.store.get_member(owner_id, member_id)
        workload = self.calculator.workload_of(owner_id, member_id)
        if workload >= member.capacity:
            logger.warning(
                f"Assigning to {member.name} who is at or over capacity "
                f"({workload}/{member.capacity})"
            )
            return f"{member.name} is at or over capacity ({workload}/{member.capacity})"
        return None

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def create_member(self, owner_id: int, name: str, capacity: int) -> Result[Member]:
        def create():
            clean_name = validate_member_fields(name, capacity)
            member = self.store.create_member(owner_id, clean_name, capacity)
            logger.info(f"Created member {member.name} with capacity {member.capacity}")
            return member
        return self._run("create member", create)

    def list_members(self, owner_id: int) -> Result[List[Member]]:
        return self._run("fetch members", lambda: self.store.list_members(owner_id))

    def delete_member(self, owner_id: int, member_id: int) -> Result[int]:
        """Delete a member. The value is the number of tasks left unassigned."""
        def delete():
            unassigned = self.store.delete_member(owner_id, member_id)
            logger.info(f"Deleted member {member_id}, unassigned {unassigned} task(s)")
            return unassigned
        return self._run("delete member", delete)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(
        self,
        owner_id: int,
        title: str,
        member_id: Optional[int] = None,
        priority=Priority.MEDIUM,
        status=Status.TODO,
    ) -> Result[TaskWrite]:
        def create():
            clean_title = validate_title(title)
            prio = _parse_enum(Priority, priority, "Priority")
            stat = _parse_enum(Status, status, "Status")
            warning = self._capacity_warning(owner_id, member_id)
            task = self.store.create_task(owner_id, clean_title, member_id, prio, stat)
            return TaskWrite(task=task, capacity_warning=warning)
        return self._run("create task", create)

    def list_tasks(
        self,
        owner_id: int,
        status: Optional[Status] = None,
        member_id: Optional[int] = None,
    ) -> Result[List[Task]]:
        return self._run(
            "fetch tasks",
            lambda: self.store.list_tasks(owner_id, status=status, member_id=member_id),
        )

    def update_task(
        self,
        owner_id: int,
        task_id: int,
        title=_UNSET,
        assigned_member_id=_UNSET,
        priority=_UNSET,
        status=_UNSET,
    ) -> Result[TaskWrite]:
        def update():
            changes = {}
            if title is not _UNSET:
                changes["title"] = validate_title(title)
            if priority is not _UNSET:
                changes["priority"] = _parse_enum(Priority, priority, "Priority")
            if status is not _UNSET:
                changes["status"] = _parse_enum(Status, status, "Status")

            warning = None
            if assigned_member_id is not _UNSET:
                changes["assigned_member_id"] = assigned_member_id
                current = self.store.get_task(owner_id, task_id)
                if assigned_member_id != current.assigned_member_id:
                    warning = self._capacity_warning(owner_id, assigned_member_id)

            task = self.store.update_task(owner_id, task_id, **changes)
            return TaskWrite(task=task, capacity_warning=warning)
        return self._run("update task", update)

    def toggle_task_status(self, owner_id: int, task_id: int) -> Result[TaskWrite]:
        def toggle():
            task = self.store.get_task(owner_id, task_id)
            new_status = Status.DONE if task.is_open else Status.TODO
            task = self.store.update_task(owner_id, task_id, status=new_status)
            logger.info(f"Task '{task.title}' marked as {new_status.value}")
            return TaskWrite(task=task)
        return self._run("update task", toggle)

    def delete_task(self, owner_id: int, task_id: int) -> Result[None]:
        return self._run("delete task", lambda: self.store.delete_task(owner_id, task_id))

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def dashboard_stats(self, owner_id: int) -> Result[DashboardStats]:
        def stats():
            entries: List[MemberWorkload] = self.calculator.members_with_workload(owner_id)
            todo = self.store.count_tasks(owner_id, Status.TODO)
            done = self.store.count_tasks(owner_id, Status.DONE)
            return DashboardStats(
                total_tasks=todo + done,
                todo_tasks=todo,
                done_tasks=done,
                member_count=len(entries),
                overloaded_members=sum(1 for e in entries if e.is_overloaded),
            )
        return self._run("fetch dashboard stats", stats)
