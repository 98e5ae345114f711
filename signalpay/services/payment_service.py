import logging
import math
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from signalpay.core.errors import AuthenticityError, ConfigurationError, GatewayError, ValidationError
from signalpay.core.signature import verify_signature
from signalpay.schemas.payment import OrderResponse, PaymentDetails, VerificationResponse
from signalpay.services.gateway import PaymentGateway

logger = logging.getLogger(__name__)

MISSING_ORDER_FIELDS = "Missing required fields: planId, amount, currency, userId"
MISSING_VERIFICATION_FIELDS = "Missing payment verification parameters"
VERIFIED_MESSAGE = "Payment verified successfully"


def to_minor_units(amount: float) -> int:
    # round() so 499.99 becomes 49999 rather than 49998
    return int(round(amount * 100))


def to_major_units(amount: int) -> float:
    return amount / 100


class PaymentService:
    def __init__(
        self,
        gateway: Optional[PaymentGateway],
        key_id: str,
        key_secret: str,
        clock: Callable[[], float] = time.time,
    ):
        self.gateway = gateway
        self.key_id = key_id
        self.key_secret = key_secret
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def mint_subscription_id(self) -> str:
        return f"sub_{self._now_ms()}"

    def create_order(self, plan_id: Optional[str], amount: Any, currency: Optional[str], user_id: Optional[str]) -> OrderResponse:
        if not plan_id or not amount or not currency or not user_id:
            raise ValidationError(error=MISSING_ORDER_FIELDS)
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount) or amount <= 0:
            raise ValidationError("amount must be a positive number", error="Invalid amount")

        if not self.gateway:
            raise ConfigurationError("Razorpay client not initialized", error="Failed to create order")

        options = {
            "amount": to_minor_units(amount),
            "currency": currency,
            "receipt": f"receipt_{self._now_ms()}",
            "notes": {
                "planId": plan_id,
                "userId": user_id,
                "orderDate": datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat(),
            },
        }

        try:
            order = self.gateway.create_order(options)
        except GatewayError as e:
            logger.error(f"Order creation error: {e}")
            raise GatewayError(e.message, error="Failed to create order", transient=e.transient) from e

        logger.info(f"Created order {order['id']} for user {user_id} on plan {plan_id}")
        return OrderResponse(
            order_id=order["id"],
            amount=order["amount"],
            currency=order["currency"],
            key_id=self.key_id,
        )

    def verify_payment(
        self,
        order_id: Optional[str],
        payment_id: Optional[str],
        signature: Optional[str],
        user_id: Optional[str] = None,
        plan_id: Optional[str] = None,
    ) -> VerificationResponse:
        """
        Verifies the checkout signature and, when authentic, mints a subscription id.

        The signature is the only trust boundary. If the payment details cannot be
        fetched afterwards the verification still succeeds, without ``payment``.
        Every successful call mints a fresh subscription id; repeated calls for the
        same order are not deduplicated.
        """
        if not order_id or not payment_id or not signature:
            raise ValidationError(error=MISSING_VERIFICATION_FIELDS)

        if not self.key_secret:
            raise ConfigurationError("Razorpay secret not configured", error="Verification failed")

        if not verify_signature(order_id, payment_id, signature, self.key_secret):
            logger.warning(f"Invalid payment signature for order {order_id}, payment {payment_id}")
            raise AuthenticityError()

        payment = self._fetch_payment_details(payment_id)
        if payment is None:
            logger.info(
                f"Payment verified without details: order={order_id} payment={payment_id} "
                f"user={user_id} plan={plan_id}"
            )
        else:
            logger.info(
                f"Payment verified successfully: order={order_id} payment={payment_id} user={user_id} "
                f"plan={plan_id} amount={payment.amount} status={payment.status}"
            )

        return VerificationResponse(
            success=True,
            message=VERIFIED_MESSAGE,
            subscriptionId=self.mint_subscription_id(),
            payment=payment,
        )

    def _fetch_payment_details(self, payment_id: str) -> Optional[PaymentDetails]:
        if not self.gateway:
            logger.warning("Razorpay client not initialized, skipping payment details")
            return None
        # A valid signature already authenticated the payment, so any failure
        # here, transport or payload, only costs the receipt.
        try:
            payment = self.gateway.fetch_payment(payment_id)
            return PaymentDetails(
                id=payment["id"],
                amount=to_major_units(payment["amount"]),
                currency=payment.get("currency"),
                status=payment.get("status"),
                method=payment.get("method"),
                email=payment.get("email"),
                contact=payment.get("contact"),
            )
        except Exception as e:
            logger.error(f"Error fetching payment details for {payment_id}: {e!r}")
            return None
