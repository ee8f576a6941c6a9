"""
Workload calculator.

A member's workload is the number of open (Todo) tasks assigned to it.
Done tasks never count: workload measures open work, not history.
"""
from dataclasses import dataclass
from typing import Iterable, List

from app.logger import get_logger
from app.models import Member, Status, Task

logger = get_logger(__name__)


@dataclass
class MemberWorkload:
    """A member paired with its current workload."""
    member: Member
    workload: int

    @property
    def capacity(self) -> int:
        return self.member.capacity

    @property
    def is_overloaded(self) -> bool:
        return self.workload > self.member.capacity

    @property
    def is_available(self) -> bool:
        return self.workload < self.member.capacity

    @property
    def at_or_over_capacity(self) -> bool:
        return self.workload >= self.member.capacity

    @property
    def load_state(self) -> str:
        """'under', 'at' or 'over' capacity."""
        if self.workload < self.member.capacity:
            return "under"
        if self.workload == self.member.capacity:
            return "at"
        return "over"

    def to_dict(self) -> dict:
        data = self.member.to_dict()
        data.update({"workload": self.workload, "load_state": self.load_state})
        return data


def count_open_tasks(tasks: Iterable[Task], member_id: int) -> int:
    """Count the tasks assigned to member_id that are still Todo."""
    return sum(
        1 for task in tasks
        if task.assigned_member_id == member_id and task.status == Status.TODO.value
    )


class WorkloadCalculator:
    """
    Applies count_open_tasks to tasks read from a RecordStore.

    Nothing is cached; each call reflects the store as it is now.
    """

    def __init__(self, store):
        self.store = store

    def workload_of(self, owner_id: int, member_id: int) -> int:
        return self.store.count_todo_tasks(owner_id, member_id)

    def members_with_workload(self, owner_id: int) -> List[MemberWorkload]:
        """All members of the owner with workload, in registration order."""
        members = self.store.list_members(owner_id)
        tasks = self.store.list_tasks(owner_id)
        entries = [
            MemberWorkload(member=m, workload=count_open_tasks(tasks, m.id))
            for m in members
        ]
        logger.debug(
            f"Workload for owner {owner_id}: "
            + ", ".join(f"{e.member.name}={e.workload}/{e.capacity}" for e in entries)
        )
        return entries
