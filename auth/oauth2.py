"""
Bearer token dependency that resolves the calling owner.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from api.deps import ServiceFailure, get_store
from app.errors import StoreError
from app.result import Result, UNAUTHENTICATED
from app.store import RecordStore
from auth.jwt_handler import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def _not_authenticated() -> ServiceFailure:
    return ServiceFailure(Result.fail("Not authenticated", code=UNAUTHENTICATED))


def get_current_owner_id(
    token: Optional[str] = Depends(oauth2_scheme),
    store: RecordStore = Depends(get_store),
) -> int:
    """
    Decode the bearer token and return the id of the user it was issued for.
    The user must still exist.
    """
    payload = decode_access_token(token) if token else None
    subject = payload.get("sub") if payload else None
    try:
        owner_id = int(subject)
    except (TypeError, ValueError):
        raise _not_authenticated()

    try:
        user = store.get_user(owner_id)
    except StoreError as e:
        raise ServiceFailure(Result.fail(e.message, code=e.code))
    if user is None:
        raise _not_authenticated()
    return owner_id
