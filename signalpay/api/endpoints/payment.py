from typing import Optional
from fastapi import APIRouter, Depends
from signalpay.api.deps import ensure_same_user, get_current_user_conditional, get_payment_service
from signalpay.core.errors import GatewayError, PaymentError
from signalpay.core.security import TokenData
from signalpay.schemas.payment import (
    OrderCreateRequest,
    OrderResponse,
    PaymentVerificationRequest,
    VerificationResponse,
)
from signalpay.services.payment_service import PaymentService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

# Handlers are plain functions: the Razorpay SDK is blocking, so FastAPI runs
# them in its threadpool.

@router.post("/order", response_model=OrderResponse)
def create_order(
    request: OrderCreateRequest,
    service: PaymentService = Depends(get_payment_service),
    current_user: Optional[TokenData] = Depends(get_current_user_conditional),
):
    """
    Create a Razorpay order for a subscription plan.

    Accepts: planId, amount (major units), currency, userId
    Returns: order_id, amount (minor units), currency, key_id
    """
    ensure_same_user(current_user, request.userId)
    try:
        return service.create_order(request.planId, request.amount, request.currency, request.userId)
    except PaymentError:
        raise
    except Exception as e:
        logger.exception(f"Order creation error: {e}")
        raise GatewayError(str(e), error="Failed to create order")


@router.post("/verify", response_model=VerificationResponse, response_model_exclude_none=True)
def verify_payment(
    request: PaymentVerificationRequest,
    service: PaymentService = Depends(get_payment_service),
    current_user: Optional[TokenData] = Depends(get_current_user_conditional),
):
    """
    Verify the payment signature returned by Razorpay checkout.

    - 200 with a fresh subscriptionId when the signature is authentic
    - 400 with error "Invalid signature" otherwise
    - payment details are included only when Razorpay returned them
    """
    ensure_same_user(current_user, request.userId)
    try:
        return service.verify_payment(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
            request.userId,
            request.planId,
        )
    except PaymentError:
        raise
    except Exception as e:
        logger.exception(f"Verification error: {e}")
        raise PaymentError(str(e), error="Verification failed")
