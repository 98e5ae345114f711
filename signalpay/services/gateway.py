import logging
import time
from typing import Any, Callable, Dict, Optional

import razorpay
import requests
from razorpay.errors import BadRequestError, ServerError, SignatureVerificationError
from razorpay.errors import GatewayError as RazorpayGatewayError

from signalpay.core.config import Settings
from signalpay.core.errors import GatewayError

logger = logging.getLogger(__name__)

# Failures worth another attempt. Everything else the SDK or its transport
# raises is authoritative and surfaces immediately as a GatewayError.
TRANSIENT_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    ServerError,
)
REJECTION_ERRORS = (
    BadRequestError,
    RazorpayGatewayError,
    SignatureVerificationError,
    requests.exceptions.RequestException,
)


class PaymentGateway:
    """Operations the payment service needs from the payment provider."""

    def create_order(self, options: Dict[str, Any]) -> Dict[str, Any]:  # pragma: no cover
        raise NotImplementedError

    def fetch_payment(self, payment_id: str) -> Dict[str, Any]:  # pragma: no cover
        raise NotImplementedError


class RazorpayGateway(PaymentGateway):
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff: float = 0.5,
        deadline: float = 20.0,
        client: Optional[Any] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.key_id = key_id
        self.client = client or razorpay.Client(auth=(key_id, key_secret))
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.deadline = deadline
        self._sleep = sleep
        self._clock = clock

    def create_order(self, options: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("order creation", self.client.order.create, data=options)

    def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        return self._call(f"payment fetch {payment_id}", self.client.payment.fetch, payment_id)

    def _call(self, description: str, func: Callable[..., Dict[str, Any]], *args, **kwargs) -> Dict[str, Any]:
        """
        Run a Razorpay SDK call with a per-attempt timeout and exponential backoff.

        Gives up after ``max_attempts`` or when the next wait would cross the
        overall deadline.
        """
        started = self._clock()
        attempt = 0
        while True:
            attempt += 1
            try:
                return func(*args, timeout=self.timeout, **kwargs)
            except TRANSIENT_ERRORS as e:
                delay = self.backoff * (2 ** (attempt - 1))
                elapsed = self._clock() - started
                if attempt >= self.max_attempts or elapsed + delay > self.deadline:
                    logger.error(f"Razorpay {description} failed after {attempt} attempt(s): {e}")
                    raise GatewayError(str(e) or type(e).__name__, transient=True) from e
                logger.warning(
                    f"Razorpay {description} failed (attempt {attempt}/{self.max_attempts}): {e}. "
                    f"Retrying in {delay:.2f}s"
                )
                self._sleep(delay)
            except REJECTION_ERRORS as e:
                logger.error(f"Razorpay rejected {description}: {e}")
                raise GatewayError(str(e) or type(e).__name__) from e


def build_gateway(settings: Settings) -> Optional[RazorpayGateway]:
    if not settings.razorpay_configured:
        logger.warning("Razorpay keys not set. Payment operations will fail.")
        return None

    return RazorpayGateway(
        settings.RAZORPAY_KEY_ID,
        settings.RAZORPAY_SECRET,
        timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        max_attempts=settings.GATEWAY_MAX_ATTEMPTS,
        backoff=settings.GATEWAY_BACKOFF_SECONDS,
        deadline=settings.GATEWAY_DEADLINE_SECONDS,
    )
