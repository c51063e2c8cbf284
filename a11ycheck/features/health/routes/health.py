from datetime import datetime, timezone

from fastapi import APIRouter, status

from a11ycheck.platform.response import api_response

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check():
    return api_response(
        data={
            "status": "ok",
            "service": "A11yCheck",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        message="Service is healthy",
        status_code=status.HTTP_200_OK,
    )
