from fastapi import APIRouter
from signalpay.api.endpoints import health, payment

api_router = APIRouter()
api_router.include_router(payment.router, tags=["payment"])
api_router.include_router(health.router, tags=["health"])
