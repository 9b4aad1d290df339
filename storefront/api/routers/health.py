from fastapi import APIRouter

from storefront.data.database import ping_db

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health():
    db_ok = ping_db()
    return {
        "status": "ok" if db_ok else "degraded",
        "database": "connected" if db_ok else "unavailable",
    }
