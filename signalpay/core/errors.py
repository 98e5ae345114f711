"""
Payment error taxonomy.

Every error carries the HTTP status and the ``{error, message}`` envelope it is
rendered as by the exception handler registered in ``signalpay.main``.
"""
from typing import Any, Dict, Optional


class PaymentError(Exception):
    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        super().__init__(message or error or self.error)
        self.message = message
        if error is not None:
            self.error = error

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class ValidationError(PaymentError):
    """Missing or malformed caller input."""
    status_code = 400
    error = "Invalid request"


class AuthenticityError(PaymentError):
    """Payment signature did not match. Never retryable."""
    status_code = 400
    error = "Invalid signature"

    def __init__(self, message: str = "Payment verification failed"):
        super().__init__(message)


class GatewayError(PaymentError):
    """Upstream payment provider failure."""
    status_code = 500
    error = "Gateway error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None, transient: bool = False):
        super().__init__(message, error)
        self.transient = transient


class ConfigurationError(PaymentError):
    """Razorpay credentials are not configured."""
    status_code = 500
    error = "Payment gateway not configured"
