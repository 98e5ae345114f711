from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from signalpay.core.config import Settings, get_settings
from signalpay.schemas.payment import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(settings: Settings = Depends(get_settings)):
    return HealthResponse(
        status="OK",
        message=settings.PROJECT_NAME,
        timestamp=datetime.now(timezone.utc).isoformat(),
        razorpayConfigured=settings.razorpay_configured,
    )
