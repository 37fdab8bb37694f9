from .router import router
from .gateway import PaymentGateway, SimulatedPaymentGateway, simulate_payment, generate_transaction_id, get_payment_gateway
from .schemas import PaymentDetails, PaymentProvider, PaymentResult, PaymentStatus, PaymentRequest

__all__ = [
    "router",
    "PaymentGateway",
    "SimulatedPaymentGateway",
    "simulate_payment",
    "generate_transaction_id",
    "get_payment_gateway",
    "PaymentDetails",
    "PaymentProvider",
    "PaymentResult",
    "PaymentStatus",
    "PaymentRequest",
]
