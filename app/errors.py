"""
Exceptions raised inside the balancing core and the record store.

Each carries the error kind used in Result.error_code. They never cross
the service boundary: BalancingService and TeamService turn them into
failed Results.
"""
from typing import Any, Optional

from app import result


class BalancerError(Exception):
    """Base class for all task balancer errors."""

    code = result.STORE_ERROR

    def __init__(self, message: str, partial: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        # Progress committed before the failure, if any
        self.partial = partial

    def __str__(self) -> str:
        return self.message


class Unauthenticated(BalancerError):
    code = result.UNAUTHENTICATED


class NotFound(BalancerError):
    code = result.NOT_FOUND


class ValidationError(BalancerError):
    code = result.VALIDATION_ERROR


class NoMembersAvailable(BalancerError):
    code = result.NO_MEMBERS_AVAILABLE


class NoCapacityAvailable(BalancerError):
    code = result.NO_CAPACITY_AVAILABLE


class StoreError(BalancerError):
    code = result.STORE_ERROR
