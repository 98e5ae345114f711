from typing import Optional, Union
from pydantic import BaseModel

# Request fields are optional so missing values reach the service layer and are
# reported as 400 with the documented message instead of a schema error.

class OrderCreateRequest(BaseModel):
    planId: Optional[str] = None
    amount: Optional[Union[int, float]] = None
    currency: Optional[str] = None
    userId: Optional[str] = None

class OrderResponse(BaseModel):
    order_id: str
    amount: int  # minor currency units (paise)
    currency: str
    key_id: str

class PaymentVerificationRequest(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    userId: Optional[str] = None
    planId: Optional[str] = None

class PaymentDetails(BaseModel):
    id: str
    amount: float  # major currency units
    currency: Optional[str] = None
    status: Optional[str] = None
    method: Optional[str] = None
    email: Optional[str] = None
    contact: Optional[str] = None

class VerificationResponse(BaseModel):
    success: bool
    message: str
    subscriptionId: Optional[str] = None
    payment: Optional[PaymentDetails] = None

class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
    razorpayConfigured: bool
