from fastapi import APIRouter

from app.db import check_db_connection

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check():
    """Service and database health."""
    database_ok = check_db_connection()
    return {
        "status": "healthy" if database_ok else "degraded",
        "services": {"database": database_ok},
    }
