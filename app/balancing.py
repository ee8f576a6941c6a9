"""
Balancing service: the entry point the HTTP layer calls for workload,
auto-assign and rebalance. Every method returns a Result and never raises.
"""
from typing import List

from app.assigner import AutoAssigner
from app.errors import BalancerError
from app.logger import get_logger
from app.rebalancer import RebalanceReport, Rebalancer
from app.result import Result, STORE_ERROR
from app.store import RecordStore
from app.workload import MemberWorkload, WorkloadCalculator

logger = get_logger(__name__)


class BalancingService:

    def __init__(self, store: RecordStore):
        self.store = store
        self.calculator = WorkloadCalculator(store)
        self.assigner = AutoAssigner(self.calculator)
        self.rebalancer = Rebalancer(store, self.calculator)

    def get_members_with_workload(self, owner_id: int) -> Result[List[MemberWorkload]]:
        try:
            return Result.ok(self.calculator.members_with_workload(owner_id))
        except BalancerError as e:
            return Result.fail(e.message, code=e.code)
        except Exception as e:
            logger.exception("Unexpected error while computing workloads")
            return Result.fail(f"Failed to fetch members with workload: {e}", code=STORE_ERROR)

    def auto_assign(self, owner_id: int) -> Result[MemberWorkload]:
        try:
            return Result.ok(self.assigner.select_member_for_new_task(owner_id))
        except BalancerError as e:
            return Result.fail(e.message, code=e.code)
        except Exception as e:
            logger.exception("Unexpected error during auto-assign")
            return Result.fail(f"Failed to auto-assign task: {e}", code=STORE_ERROR)

    def reassign_all(self, owner_id: int) -> Result[RebalanceReport]:
        """
        Run a rebalance pass.

        On failure after some moves were committed, the failed Result
        carries the partial report as its value.
        """
        try:
            return Result.ok(self.rebalancer.rebalance(owner_id))
        except BalancerError as e:
            return Result.fail(e.message, code=e.code, value=e.partial)
        except Exception as e:
            logger.exception("Unexpected error during rebalance")
            return Result.fail(f"Failed to reassign tasks: {e}", code=STORE_ERROR)
