"""
Payment gateway interface and the simulated UPI gateway.

The booking code only talks to `PaymentGateway`, so a real provider can be
plugged in by implementing `charge`.
"""

import asyncio
import logging
import secrets
import time
from abc import ABC, abstractmethod
from typing import Optional

from bustrack.config import settings
from bustrack.exceptions import PaymentError, ValidationError
from bustrack.payments.schemas import PaymentDetails, PaymentProvider, PaymentResult

logger = logging.getLogger(__name__)


def generate_transaction_id() -> str:
    return f"TXN{int(time.time() * 1000)}{secrets.token_hex(4).upper()}"


def validate_payment_request(amount: float, provider: PaymentProvider, upi_id: Optional[str]):
    if amount is None or amount < 0:
        raise ValidationError("Payment amount must not be negative")
    if provider == PaymentProvider.OTHER and not (upi_id or "").strip():
        raise ValidationError("UPI ID is required for the 'other' provider")


class PaymentGateway(ABC):
    """Interface every payment backend implements"""

    @abstractmethod
    async def charge(
        self,
        amount: float,
        provider: PaymentProvider,
        upi_id: Optional[str] = None,
    ) -> PaymentResult:
        ...

    def submit(
        self,
        amount: float,
        provider: PaymentProvider,
        upi_id: Optional[str] = None,
    ) -> "asyncio.Task[PaymentResult]":
        """Start a charge in the background; cancel the task to abandon it"""
        validate_payment_request(amount, provider, upi_id)
        return asyncio.create_task(self.charge(amount, provider, upi_id))


class SimulatedPaymentGateway(PaymentGateway):
    """Approves every valid request after a fixed processing delay"""

    def __init__(self, processing_seconds: Optional[float] = None):
        if processing_seconds is None:
            processing_seconds = settings.PAYMENT_PROCESSING_SECONDS
        self.processing_seconds = processing_seconds

    async def charge(
        self,
        amount: float,
        provider: PaymentProvider,
        upi_id: Optional[str] = None,
    ) -> PaymentResult:
        try:
            validate_payment_request(amount, provider, upi_id)
        except ValidationError as e:
            return PaymentResult(success=False, error=e.message)

        provider = PaymentProvider(provider)
        await asyncio.sleep(self.processing_seconds)

        details = PaymentDetails(
            amount=amount,
            upi_id=upi_id or f"{provider.value}@user",
            provider=provider,
            transaction_id=generate_transaction_id(),
        )
        logger.info("Simulated %s payment of %s approved: %s", provider.value, amount, details.transaction_id)
        return PaymentResult(success=True, details=details)


async def simulate_payment(
    amount: float,
    provider: PaymentProvider,
    upi_id: Optional[str] = None,
    gateway: Optional[PaymentGateway] = None,
) -> PaymentDetails:
    """Run a payment and return its details, raising on rejection"""
    validate_payment_request(amount, provider, upi_id)
    gateway = gateway or SimulatedPaymentGateway()
    result = await gateway.charge(amount, provider, upi_id)
    if not result.success or result.details is None:
        raise PaymentError(result.error or "Payment failed")
    return result.details


def get_payment_gateway() -> PaymentGateway:
    return SimulatedPaymentGateway()
