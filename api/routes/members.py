from fastapi import APIRouter, Depends

from api.deps import get_balancing_service, get_team_service, unwrap
from app.balancing import BalancingService
from app.team import TeamService
from auth.oauth2 import get_current_owner_id
from schemas.members import (
    MemberCreate,
    MemberDeleteResponse,
    MemberListResponse,
    MemberResponse,
)

router = APIRouter(prefix="/api/members", tags=["Members"])


@router.get("", response_model=MemberListResponse)
def list_members(
    owner_id: int = Depends(get_current_owner_id),
    balancing: BalancingService = Depends(get_balancing_service),
):
    """Members in registration order with their current workload."""
    entries = unwrap(balancing.get_members_with_workload(owner_id))
    return {"members": [e.to_dict() for e in entries], "total": len(entries)}


@router.post("", response_model=MemberResponse, status_code=201)
def create_member(
    body: MemberCreate,
    owner_id: int = Depends(get_current_owner_id),
    team: TeamService = Depends(get_team_service),
):
    member = unwrap(team.create_member(owner_id, body.name, body.capacity))
    return member.to_dict()


@router.delete("/{member_id}", response_model=MemberDeleteResponse)
def delete_member(
    member_id: int,
    owner_id: int = Depends(get_current_owner_id),
    team: TeamService = Depends(get_team_service),
):
    """Delete a member; its tasks stay and become unassigned."""
    unassigned = unwrap(team.delete_member(owner_id, member_id))
    return {"message": "Member deleted", "unassigned_tasks": unassigned}
