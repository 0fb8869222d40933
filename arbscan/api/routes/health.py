import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from arbscan.schemas.arbitrage import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health():
    logger.info("Ping received: server is warm")
    return HealthResponse(
        status="Active",
        message="Server is awake and ready for arbitrage!",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
