"""
Booking flow state machine.

    details -> seats -> payment -> confirmation

Seats may go back to details, payment may be cancelled back to seats.
Nothing leaves confirmation. Any non-terminal step may be abandoned, in
which case nothing is persisted.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

from bustrack.bookings.builder import (
    build_booking, calculate_total, validate_journey, validate_passenger, validate_seats
)
from bustrack.bookings.schemas import Booking, BookingStep, JourneyDetails, PassengerDetails
from bustrack.bookings.store import BookingStore
from bustrack.config import settings
from bustrack.exceptions import BookingFlowError, PaymentError, ValidationError
from bustrack.payments.gateway import PaymentGateway, SimulatedPaymentGateway
from bustrack.payments.schemas import PaymentProvider
from bustrack.seats.allocator import generate_seat_map, toggle_seat
from bustrack.seats.schemas import Seat

logger = logging.getLogger(__name__)


class BookingFlow:
    """One passenger's walk through the booking steps for a single vehicle"""

    def __init__(
        self,
        total_seats: int,
        booked_seats: Iterable[str] = (),
        store: Optional[BookingStore] = None,
        gateway: Optional[PaymentGateway] = None,
        max_seats: Optional[int] = None,
        unit_price: Optional[float] = None,
    ):
        self.total_seats = total_seats
        self.booked_seats = list(booked_seats)
        self.store = store
        self.gateway = gateway or SimulatedPaymentGateway()
        self.max_seats = max_seats if max_seats is not None else settings.MAX_SEATS_PER_BOOKING
        self.unit_price = unit_price if unit_price is not None else settings.TICKET_PRICE

        self.step = BookingStep.DETAILS
        self.passenger: Optional[PassengerDetails] = None
        self.journey: Optional[JourneyDetails] = None
        self.selected_seats: List[str] = []
        self.booking: Optional[Booking] = None
        self._payment_task: Optional[asyncio.Task] = None

    @property
    def total_amount(self) -> float:
        return calculate_total(len(self.selected_seats), self.unit_price)

    def _require(self, *steps: BookingStep):
        if self.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise BookingFlowError(f"Not allowed in step '{self.step.value}' (expected {allowed})")

    def seat_map(self) -> List[Seat]:
        return generate_seat_map(self.total_seats, self.booked_seats, self.selected_seats)

    # Details
    def submit_details(self, passenger: PassengerDetails, journey: JourneyDetails):
        self._require(BookingStep.DETAILS)
        errors = validate_passenger(passenger) + validate_journey(journey)
        if errors:
            raise ValidationError("Booking details are incomplete", errors)
        self.passenger = passenger
        self.journey = journey
        self.step = BookingStep.SEATS

    # Seats
    def back_to_details(self):
        self._require(BookingStep.SEATS)
        self.step = BookingStep.DETAILS

    def toggle_seat(self, seat_number: str) -> List[str]:
        self._require(BookingStep.SEATS)
        if seat_number not in {seat.seat_number for seat in self.seat_map()}:
            raise ValidationError(f"Seat {seat_number} does not exist on this vehicle")
        self.selected_seats = toggle_seat(seat_number, self.selected_seats, self.max_seats, self.booked_seats)
        return list(self.selected_seats)

    def clear_selection(self):
        self._require(BookingStep.SEATS)
        self.selected_seats = []

    def confirm_seats(self):
        self._require(BookingStep.SEATS)
        if not self.selected_seats:
            raise ValidationError("At least one seat must be selected")
        self.step = BookingStep.PAYMENT

    # Payment
    def cancel_payment(self):
        """Return to seat selection, discarding any payment still in flight"""
        self._require(BookingStep.PAYMENT)
        self._cancel_payment_task()
        self.step = BookingStep.SEATS

    async def pay(self, provider: PaymentProvider, upi_id: Optional[str] = None) -> Booking:
        """Charge the seat total, then build and persist the booking"""
        self._require(BookingStep.PAYMENT)
        if self._payment_task is not None:
            raise BookingFlowError("A payment is already in progress")
        errors = validate_seats(self.selected_seats, self.max_seats)
        if errors:
            raise ValidationError("Seat selection is invalid", errors)

        task = self.gateway.submit(self.total_amount, provider, upi_id)
        self._payment_task = task
        try:
            result = await task
        except asyncio.CancelledError:
            if task.cancelled() and self.step != BookingStep.PAYMENT:
                raise BookingFlowError("Payment was cancelled")
            raise
        finally:
            self._payment_task = None

        if self.step != BookingStep.PAYMENT:
            raise BookingFlowError("Payment was cancelled")
        if not result.success or result.details is None:
            raise PaymentError(result.error or "Payment failed")

        booking = build_booking(
            self.passenger, self.journey, self.selected_seats, result.details,
            unit_price=self.unit_price, max_seats=self.max_seats,
        )
        if self.store is not None:
            self.store.create_booking(booking)

        self.booking = booking
        self.step = BookingStep.CONFIRMATION
        logger.info("Booking flow confirmed %s", booking.booking_id)
        return booking

    # Exit
    def abandon(self):
        self._require(BookingStep.DETAILS, BookingStep.SEATS, BookingStep.PAYMENT)
        self._cancel_payment_task()
        self.step = BookingStep.ABANDONED

    def _cancel_payment_task(self):
        if self._payment_task is not None and not self._payment_task.done():
            self._payment_task.cancel()
