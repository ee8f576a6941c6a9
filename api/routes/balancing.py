from fastapi import APIRouter, Depends

from api.deps import get_balancing_service, unwrap
from app.balancing import BalancingService
from auth.oauth2 import get_current_owner_id
from schemas.balancing import AutoAssignResponse, ReassignResponse
from schemas.members import MemberListResponse

router = APIRouter(prefix="/api/balancing", tags=["Balancing"])


@router.get("/workload", response_model=MemberListResponse)
def get_workload(
    owner_id: int = Depends(get_current_owner_id),
    balancing: BalancingService = Depends(get_balancing_service),
):
    entries = unwrap(balancing.get_members_with_workload(owner_id))
    return {"members": [e.to_dict() for e in entries], "total": len(entries)}


@router.post("/auto-assign", response_model=AutoAssignResponse)
def auto_assign(
    owner_id: int = Depends(get_current_owner_id),
    balancing: BalancingService = Depends(get_balancing_service),
):
    """
    Suggest the least-loaded member for a new task. Nothing is written;
    the client creates the task with the suggested member id.
    """
    choice = unwrap(balancing.auto_assign(owner_id))
    return {"member": choice.to_dict(), "at_or_over_capacity": choice.at_or_over_capacity}


@router.post("/reassign", response_model=ReassignResponse)
def reassign_all(
    owner_id: int = Depends(get_current_owner_id),
    balancing: BalancingService = Depends(get_balancing_service),
):
    """
    Move excess Low/Medium tasks from overloaded members to members with
    spare capacity. Moves made before a failure are kept and reported.
    """
    result = balancing.reassign_all(owner_id)
    partial = {"reassigned_count": result.value.reassigned_count} if result.value else None
    report = unwrap(result, partial)
    if report.reassigned_count == 0 and report.unresolved_excess == 0:
        message = "No rebalancing needed"
    elif report.reassigned_count == 0:
        message = "No tasks could be reassigned"
    else:
        message = f"Reassigned {report.reassigned_count} task(s)"
    return {**report.to_dict(), "message": message}
