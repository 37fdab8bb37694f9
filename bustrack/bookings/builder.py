"""
Assembly of a confirmed Booking from the passenger form, the journey, the
selected seats and the payment confirmation.
"""

import logging
import secrets
import time
from datetime import datetime
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from bustrack.bookings.schemas import Booking, JourneyDetails, PassengerDetails
from bustrack.config import settings
from bustrack.exceptions import ValidationError
from bustrack.payments.schemas import PaymentDetails, PaymentStatus

logger = logging.getLogger(__name__)


def generate_booking_id() -> str:
    """Millisecond timestamp plus a random suffix so ids stay unique within a millisecond"""
    return f"BKG{int(time.time() * 1000)}{secrets.token_hex(3).upper()}"


def calculate_total(seat_count: int, unit_price: Optional[float] = None) -> float:
    if unit_price is None:
        unit_price = settings.TICKET_PRICE
    return seat_count * unit_price


def validate_passenger(passenger: PassengerDetails) -> List[str]:
    errors = []
    if not passenger.name.strip():
        errors.append("Passenger name is required")
    if not passenger.email.strip():
        errors.append("Passenger email is required")
    else:
        try:
            validate_email(passenger.email, check_deliverability=False)
        except EmailNotValidError:
            errors.append("Passenger email is not a valid address")
    if not passenger.phone.strip():
        errors.append("Passenger phone is required")
    return errors


def validate_journey(journey: JourneyDetails) -> List[str]:
    errors = []
    if not journey.from_stop.strip():
        errors.append("Origin stop is required")
    if not journey.to_stop.strip():
        errors.append("Destination stop is required")
    if journey.from_stop and journey.from_stop == journey.to_stop:
        errors.append("Origin and destination must differ")
    return errors


def validate_seats(seats: List[str], max_seats: Optional[int] = None) -> List[str]:
    if max_seats is None:
        max_seats = settings.MAX_SEATS_PER_BOOKING
    errors = []
    if not seats:
        errors.append("At least one seat must be selected")
    elif len(set(seats)) != len(seats):
        errors.append("Seat numbers must be unique")
    if len(seats) > max_seats:
        errors.append(f"At most {max_seats} seats can be booked at once")
    return errors


def build_booking(
    passenger: PassengerDetails,
    journey: JourneyDetails,
    seats: List[str],
    payment: PaymentDetails,
    unit_price: Optional[float] = None,
    max_seats: Optional[int] = None,
) -> Booking:
    """Build the booking record for a completed payment.

    Raises ValidationError listing every problem found with the inputs, or
    when the paid amount does not match the seat total.
    """
    errors = validate_passenger(passenger) + validate_journey(journey) + validate_seats(seats, max_seats)
    if errors:
        raise ValidationError("Booking details are incomplete", errors)

    total_amount = calculate_total(len(seats), unit_price)
    if payment.amount != total_amount:
        raise ValidationError(
            "Payment amount does not match booking total",
            {"expected": total_amount, "paid": payment.amount},
        )

    booking = Booking(
        booking_id=generate_booking_id(),
        passenger_name=passenger.name.strip(),
        passenger_email=passenger.email.strip(),
        passenger_phone=passenger.phone.strip(),
        bus_id=journey.bus_id,
        route_number=journey.route_number,
        from_stop=journey.from_stop,
        to_stop=journey.to_stop,
        seats=list(seats),
        total_amount=total_amount,
        booking_date=datetime.now(),
        journey_date=journey.journey_date,
        payment_status=PaymentStatus.COMPLETED,
        payment_method=payment.provider.value,
        transaction_id=payment.transaction_id,
    )
    logger.debug("Built booking %s for %s", booking.booking_id, booking.passenger_email)
    return booking
