from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from api.deps import get_store
from app.errors import StoreError
from app.logger import get_logger
from app.store import RecordStore
from auth.jwt_handler import create_access_token
from auth.oauth2 import get_current_owner_id
from auth.security import hash_password, verify_password
from schemas.auth import Token, UserCreate, UserResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", status_code=201)
def signup(user: UserCreate, store: RecordStore = Depends(get_store)):
    username = user.username.strip()
    if not username:
        raise HTTPException(status_code=422, detail="Username is required")
    try:
        if store.get_user_by_username(username):
            raise HTTPException(status_code=400, detail="User already exists")

        new_user = store.create_user(username, hash_password(user.password))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Database error: {e}")

    logger.info(f"Registered user {new_user.username}")
    return {"message": "User created successfully", "user_id": new_user.id}


@router.post("/token", response_model=Token)
def login(
    form: OAuth2PasswordRequestForm = Depends(),
    store: RecordStore = Depends(get_store)
):
    try:
        user = store.get_user_by_username(form.username)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Database error: {e}")

    if not user or not verify_password(form.password, str(user.hashed_password)):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": str(user.id)})
    return {
        "access_token": token,
        "token_type": "bearer",
        "user_id": user.id,
        "username": user.username,
    }


@router.get("/me", response_model=UserResponse)
def get_current_user(
    owner_id: int = Depends(get_current_owner_id),
    store: RecordStore = Depends(get_store)
):
    """Current user info for the bearer token."""
    try:
        user = store.get_user(owner_id)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Database error: {e}")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user.to_dict()
