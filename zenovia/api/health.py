"""Health check endpoints"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from zenovia.api.deps import get_context
from zenovia.context import AppContext

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_check(context: AppContext = Depends(get_context)):
    """
    Basic health check endpoint

    Returns 200 whenever the process is serving, whatever the database state
    """
    return {
        "success": True,
        "message": "Server is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": context.settings.NODE_ENV,
    }


@router.get("/ready")
async def readiness_check(context: AppContext = Depends(get_context)):
    """
    Readiness check - verifies the database answers a ping

    Returns 200 if ready to serve traffic, 503 if not
    """
    try:
        await context.database.ping()
    except PyMongoError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "database": "unreachable",
                "message": f"Database check failed: {e}",
            },
        )

    return {
        "success": True,
        "database": "connected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
