"""
Rebalancer: moves excess Low/Medium tasks off overloaded members.

Greedy pass over a snapshot of workloads taken at the start:

- overloaded members (workload > capacity) are processed in registration
  order, each shedding exactly workload - capacity tasks where possible;
- Low tasks leave before Medium ones, High tasks never move;
- each task goes to the currently least-loaded member with spare
  capacity (ties by registration order); receivers are kept in a heap
  that is updated after every move;
- once no member has spare capacity the pass stops for everyone.

Each move is committed on its own. A failure halfway leaves earlier moves
in place and reports them through the exception's ``partial`` report.
"""
import heapq
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from app.errors import BalancerError, NoCapacityAvailable, NoMembersAvailable
from app.logger import balancing_operation, get_logger
from app.models import MOVABLE_PRIORITIES
from app.store import RecordStore
from app.workload import MemberWorkload, WorkloadCalculator

logger = get_logger(__name__)


@dataclass
class TaskMove:
    task_id: int
    task_title: str
    from_member_id: int
    to_member_id: int

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "task_title": self.task_title,
            "from_member_id": self.from_member_id,
            "to_member_id": self.to_member_id,
        }


@dataclass
class RebalanceReport:
    """Outcome of a rebalance pass. reassigned_count equals committed moves."""
    moves: List[TaskMove] = field(default_factory=list)
    unresolved_excess: int = 0

    @property
    def reassigned_count(self) -> int:
        return len(self.moves)

    def to_dict(self) -> dict:
        return {
            "reassigned_count": self.reassigned_count,
            "unresolved_excess": self.unresolved_excess,
            "moves": [m.to_dict() for m in self.moves],
        }


class ReceiverPool:
    """
    Members that can still take tasks, least loaded first.

    Heap items are (live workload, registration index, entry). A receiver
    is popped for each move and pushed back only while it stays below
    capacity, so the ordering always reflects moves already made.
    """

    def __init__(self, receivers: Sequence[Tuple[int, MemberWorkload]]):
        self._heap: List[Tuple[int, int, MemberWorkload]] = [
            (entry.workload, index, entry)
            for index, entry in receivers
            if entry.is_available
        ]
        heapq.heapify(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def take(self) -> Optional[Tuple[int, MemberWorkload]]:
        """Remove and return (index, entry) of the least-loaded receiver."""
        if not self._heap:
            return None
        _, index, entry = heapq.heappop(self._heap)
        return index, entry

    def give_back(self, index: int, entry: MemberWorkload) -> None:
        if entry.is_available:
            heapq.heappush(self._heap, (entry.workload, index, entry))


class Rebalancer:
    """Moves excess tasks from overloaded members to available ones."""

    def __init__(self, store: RecordStore, calculator: Optional[WorkloadCalculator] = None):
        self.store = store
        self.calculator = calculator or WorkloadCalculator(store)

    @balancing_operation("rebalance")
    def rebalance(self, owner_id: int) -> RebalanceReport:
        entries = self.calculator.members_with_workload(owner_id)
        if not entries:
            raise NoMembersAvailable("No members available")

        overloaded = [e for e in entries if e.is_overloaded]
        report = RebalanceReport()
        if not overloaded:
            logger.info("No overloaded members, nothing to rebalance")
            return report

        pool = ReceiverPool(list(enumerate(entries)))
        if not pool:
            raise NoCapacityAvailable("No available members to reassign tasks to")

        logger.info(
            f"{len(overloaded)} overloaded member(s), {len(pool)} member(s) with spare capacity"
        )

        try:
            self._drain(owner_id, overloaded, pool, report)
        except BalancerError as e:
            logger.error(f"Rebalance stopped after {report.reassigned_count} move(s): {e}")
            e.partial = report
            raise

        report.unresolved_excess = sum(max(0, e.workload - e.capacity) for e in overloaded)
        logger.info(
            f"Reassigned {report.reassigned_count} task(s), "
            f"{report.unresolved_excess} excess task(s) left in place"
        )
        return report

    def _drain(
        self,
        owner_id: int,
        overloaded: Sequence[MemberWorkload],
        pool: ReceiverPool,
        report: RebalanceReport,
    ) -> None:
        for donor in overloaded:
            excess = donor.workload - donor.capacity
            candidates = self.store.list_todo_tasks_by_member(
                owner_id, donor.member.id, MOVABLE_PRIORITIES
            )[:excess]
            if len(candidates) < excess:
                logger.warning(
                    f"{donor.member.name} can shed only {len(candidates)} of "
                    f"{excess} excess task(s); the rest are High priority"
                )

            for task in candidates:
                taken = pool.take()
                if taken is None:
                    logger.warning("No member has spare capacity left, stopping")
                    return
                index, receiver = taken

                self.store.update_task_assignment(task.id, owner_id, receiver.member.id)
                report.moves.append(TaskMove(
                    task_id=task.id,
                    task_title=task.title,
                    from_member_id=donor.member.id,
                    to_member_id=receiver.member.id,
                ))
                donor.workload -= 1
                receiver.workload += 1
                pool.give_back(index, receiver)

                logger.info(
                    f"Moved '{task.title}' ({task.priority}) from {donor.member.name} "
                    f"to {receiver.member.name} ({receiver.workload}/{receiver.capacity})"
                )
