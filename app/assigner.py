"""
Auto-assigner: suggests the least-loaded member for a new task.
"""
from typing import Sequence

from app.errors import NoMembersAvailable
from app.logger import balancing_operation, get_logger
from app.workload import MemberWorkload, WorkloadCalculator

logger = get_logger(__name__)


def pick_least_loaded(entries: Sequence[MemberWorkload]) -> MemberWorkload:
    """
    Return the entry with the lowest workload.

    entries must be in registration order; min() keeps the first of equal
    keys, so the earliest registered member wins a tie.
    """
    if not entries:
        raise NoMembersAvailable("No members available")
    return min(entries, key=lambda e: e.workload)


class AutoAssigner:
    """
    Picks a member for a new or unassigned task.

    Capacity is not consulted: when everyone is full the least-loaded
    member is still suggested and flagged, and the caller decides whether
    to go ahead. Nothing is written.
    """

    def __init__(self, calculator: WorkloadCalculator):
        self.calculator = calculator

    @balancing_operation("auto-assign")
    def select_member_for_new_task(self, owner_id: int) -> MemberWorkload:
        choice = pick_least_loaded(self.calculator.members_with_workload(owner_id))
        if choice.at_or_over_capacity:
            logger.warning(
                f"Suggested member {choice.member.name} is at or over capacity "
                f"({choice.workload}/{choice.capacity})"
            )
        else:
            logger.info(
                f"Suggested member {choice.member.name} "
                f"({choice.workload}/{choice.capacity})"
            )
        return choice
