import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from signalpay.core.config import settings
from signalpay.core.errors import PaymentError
from signalpay.api.api import api_router
from signalpay.api.deps import get_payment_service
from signalpay.services.gateway import build_gateway
from signalpay.services.payment_service import PaymentService, VERIFIED_MESSAGE

# Logging Configuration
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.payment_service = PaymentService(
        build_gateway(settings),
        settings.RAZORPAY_KEY_ID,
        settings.RAZORPAY_SECRET,
    )
    logger.info(f"{settings.PROJECT_NAME} running on port {settings.PORT}")
    logger.info(f"Health check: http://localhost:{settings.PORT}{settings.API_PREFIX}/health")
    logger.info(f"Razorpay configured: {settings.razorpay_configured}")
    if not settings.razorpay_configured:
        logger.warning(
            "Razorpay credentials not configured! "
            "Please set RAZORPAY_KEY_ID and RAZORPAY_SECRET in .env file"
        )
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan
)

# CORS Middleware, open to every origin unless a list is configured
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=bool(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PaymentError)
async def payment_exception_handler(request: Request, exc: PaymentError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request", "message": errors})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "message": str(exc)},
    )

# Include Router
app.include_router(api_router, prefix=settings.API_PREFIX)

@app.post("/")
async def handle_payment_return(request: Request, service: PaymentService = Depends(get_payment_service)):
    # Razorpay posts the checkout result here as a form when callback_url is configured
    form_data = await request.form()
    try:
        result = await run_in_threadpool(
            service.verify_payment,
            form_data.get("razorpay_order_id"),
            form_data.get("razorpay_payment_id"),
            form_data.get("razorpay_signature"),
        )
    except PaymentError as e:
        logger.error(f"Error handling payment return at root: {e}")
        raise
    except Exception as e:
        logger.exception(f"Error handling payment return at root: {e}")
        raise PaymentError(str(e), error="Verification failed")

    return JSONResponse(content={
        "message": VERIFIED_MESSAGE,
        "status": "verified",
        "details": result.model_dump(exclude_none=True),
    })


def run():
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
