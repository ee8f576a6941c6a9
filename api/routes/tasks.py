from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_team_service, unwrap
from app.models import Status
from app.team import TaskWrite, TeamService
from auth.oauth2 import get_current_owner_id
from schemas.tasks import (
    DashboardStatsResponse,
    TaskCreate,
    TaskListResponse,
    TaskUpdate,
    TaskWriteResponse,
)

router = APIRouter(prefix="/api", tags=["Tasks"])


def _write_response(write: TaskWrite) -> dict:
    return {"task": write.task.to_dict(), "capacity_warning": write.capacity_warning}


@router.get("/tasks", response_model=TaskListResponse)
def list_tasks(
    status: Optional[Status] = Query(None),
    member_id: Optional[int] = Query(None),
    owner_id: int = Depends(get_current_owner_id),
    team: TeamService = Depends(get_team_service),
):
    """Tasks, newest first."""
    tasks = unwrap(team.list_tasks(owner_id, status=status, member_id=member_id))
    return {"tasks": [t.to_dict() for t in tasks], "total": len(tasks)}


@router.post("/tasks", response_model=TaskWriteResponse, status_code=201)
def create_task(
    body: TaskCreate,
    owner_id: int = Depends(get_current_owner_id),
    team: TeamService = Depends(get_team_service),
):
    """
    Create a task. Assigning to a member at or over capacity is allowed;
    the response then carries a capacity_warning.
    """
    write = unwrap(team.create_task(
        owner_id, body.title, body.member_id, body.priority, body.status
    ))
    return _write_response(write)


@router.patch("/tasks/{task_id}", response_model=TaskWriteResponse)
def update_task(
    task_id: int,
    body: TaskUpdate,
    owner_id: int = Depends(get_current_owner_id),
    team: TeamService = Depends(get_team_service),
):
    changes = body.model_dump(exclude_unset=True)
    write = unwrap(team.update_task(owner_id, task_id, **changes))
    return _write_response(write)


@router.post("/tasks/{task_id}/toggle", response_model=TaskWriteResponse)
def toggle_task(
    task_id: int,
    owner_id: int = Depends(get_current_owner_id),
    team: TeamService = Depends(get_team_service),
):
    """Flip a task between Todo and Done."""
    return _write_response(unwrap(team.toggle_task_status(owner_id, task_id)))


@router.delete("/tasks/{task_id}")
def delete_task(
    task_id: int,
    owner_id: int = Depends(get_current_owner_id),
    team: TeamService = Depends(get_team_service),
):
    unwrap(team.delete_task(owner_id, task_id))
    return {"message": "Task deleted"}


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
def dashboard_stats(
    owner_id: int = Depends(get_current_owner_id),
    team: TeamService = Depends(get_team_service),
):
    return unwrap(team.dashboard_stats(owner_id)).to_dict()
