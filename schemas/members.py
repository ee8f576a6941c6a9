from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class MemberCreate(BaseModel):
    name: str
    capacity: int = 3


class MemberResponse(BaseModel):
    id: int
    name: str
    capacity: int
    created_at: Optional[datetime] = None


class MemberWorkloadResponse(MemberResponse):
    workload: int
    load_state: str


class MemberListResponse(BaseModel):
    members: List[MemberWorkloadResponse]
    total: int


class MemberDeleteResponse(BaseModel):
    message: str
    unassigned_tasks: int
