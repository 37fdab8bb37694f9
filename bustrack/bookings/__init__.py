"""
Booking Module

Booking lifecycle for the bus ticketing flow:

- builder.py: assembles a confirmed Booking from passenger, journey, seats and payment
- flow.py: details -> seats -> payment -> confirmation state machine
- store.py: key-value persistence with user and seat indexes
- router.py: FastAPI endpoints for storing and reading bookings
- schemas.py: Pydantic models for bookings and requests
"""

from .router import router
from .builder import build_booking, generate_booking_id, calculate_total
from .flow import BookingFlow
from .store import BookingStore
from .schemas import (
    Booking, BookingStep, PassengerDetails, JourneyDetails, CheckoutRequest,
    BookingCreateResponse, BookingResponse, UserBookingsResponse, BookedSeatsResponse
)

__all__ = [
    "router",
    "build_booking",
    "generate_booking_id",
    "calculate_total",
    "BookingFlow",
    "BookingStore",
    "Booking",
    "BookingStep",
    "PassengerDetails",
    "JourneyDetails",
    "CheckoutRequest",
    "BookingCreateResponse",
    "BookingResponse",
    "UserBookingsResponse",
    "BookedSeatsResponse"
]
