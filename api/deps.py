"""
Shared dependencies and error mapping for the API routers.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app import result as kinds
from app.balancing import BalancingService
from app.db import get_db
from app.result import Result
from app.store import RecordStore
from app.team import TeamService

STATUS_BY_ERROR_CODE = {
    kinds.UNAUTHENTICATED: 401,
    kinds.NOT_FOUND: 404,
    kinds.VALIDATION_ERROR: 422,
    kinds.NO_MEMBERS_AVAILABLE: 409,
    kinds.NO_CAPACITY_AVAILABLE: 409,
    kinds.STORE_ERROR: 500,
}


class ServiceFailure(Exception):
    """Raised by routes for a failed Result; rendered by service_failure_handler."""

    def __init__(self, result: Result, extra: Optional[dict] = None):
        super().__init__(result.error)
        self.result = result
        self.extra = extra or {}

    @property
    def status_code(self) -> int:
        return STATUS_BY_ERROR_CODE.get(self.result.error_code, 500)


def unwrap(result: Result, extra: Optional[dict] = None):
    """Return the value of a successful Result or raise ServiceFailure."""
    if not result.success:
        raise ServiceFailure(result, extra)
    return result.value


async def service_failure_handler(request: Request, exc: ServiceFailure) -> JSONResponse:
    body = {"detail": exc.result.error, "error_code": exc.result.error_code}
    body.update(exc.extra)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


def get_team_service(store: RecordStore = Depends(get_store)) -> TeamService:
    return TeamService(store)


def get_balancing_service(store: RecordStore = Depends(get_store)) -> BalancingService:
    return BalancingService(store)
