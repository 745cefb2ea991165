from fastapi import APIRouter, Depends

from hirelens.ai.gateway import ModelGateway
from hirelens.api.deps import get_gateway

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check(gateway: ModelGateway = Depends(get_gateway)):
    throttle = gateway.throttle
    return {
        "status": "healthy",
        "throttle": {
            "pending": throttle.pending,
            "processing": throttle.is_processing,
            "windowSize": throttle.window_size,
            "requestsPerMinute": throttle.config.requests_per_minute,
        },
    }
