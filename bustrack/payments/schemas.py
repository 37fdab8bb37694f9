from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum

class PaymentProvider(str, Enum):
    """UPI payment provider enumeration"""
    GPAY = "gpay"
    PHONEPE = "phonepe"
    PAYTM = "paytm"
    OTHER = "other"

class PaymentStatus(str, Enum):
    """Payment status enumeration"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

class PaymentDetails(BaseModel):
    """Confirmation of a processed payment"""
    amount: float = Field(..., ge=0)
    upi_id: Optional[str] = None
    provider: PaymentProvider
    transaction_id: str

class PaymentResult(BaseModel):
    """Outcome of a gateway charge"""
    success: bool
    details: Optional[PaymentDetails] = None
    error: Optional[str] = None

class PaymentRequest(BaseModel):
    """Request to run a simulated payment"""
    amount: float = Field(..., ge=0)
    provider: PaymentProvider = PaymentProvider.GPAY
    upi_id: Optional[str] = None
