from typing import List

from pydantic import BaseModel

from schemas.members import MemberWorkloadResponse


class AutoAssignResponse(BaseModel):
    member: MemberWorkloadResponse
    at_or_over_capacity: bool


class TaskMoveResponse(BaseModel):
    task_id: int
    task_title: str
    from_member_id: int
    to_member_id: int


class ReassignResponse(BaseModel):
    reassigned_count: int
    unresolved_excess: int
    moves: List[TaskMoveResponse]
    message: str
