from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from app.models import Priority, Status


class TaskCreate(BaseModel):
    title: str
    member_id: Optional[int] = None
    priority: Priority = Priority.MEDIUM
    status: Status = Status.TODO


class TaskUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    title: Optional[str] = None
    assigned_member_id: Optional[int] = None
    priority: Optional[Priority] = None
    status: Optional[Status] = None


class TaskResponse(BaseModel):
    id: int
    title: str
    assigned_member_id: Optional[int]
    member_name: Optional[str]
    member_capacity: Optional[int]
    priority: Priority
    status: Status
    created_at: Optional[datetime] = None


class TaskWriteResponse(BaseModel):
    task: TaskResponse
    capacity_warning: Optional[str] = None


class TaskListResponse(BaseModel):
    tasks: List[TaskResponse]
    total: int


class DashboardStatsResponse(BaseModel):
    total_tasks: int
    todo_tasks: int
    done_tasks: int
    member_count: int
    overloaded_members: int
