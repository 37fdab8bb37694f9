from fastapi import APIRouter, Depends

from bustrack.payments.gateway import PaymentGateway, get_payment_gateway, simulate_payment
from bustrack.payments.schemas import PaymentRequest

router = APIRouter()

@router.post("/simulate")
async def run_simulated_payment(
    request: PaymentRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """Run a simulated UPI payment and return its confirmation"""
    
    payment = await simulate_payment(request.amount, request.provider, request.upi_id, gateway=gateway)
    
    return {"success": True, "payment": payment}
