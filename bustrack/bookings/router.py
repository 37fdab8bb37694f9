from fastapi import APIRouter, Body, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from typing import Any, Dict

from bustrack.bookings.flow import BookingFlow
from bustrack.bookings.schemas import (
    Booking, BookingCreateResponse, BookingResponse, BookedSeatsResponse,
    CheckoutRequest, UserBookingsResponse
)
from bustrack.bookings.store import BookingStore
from bustrack.config import settings
from bustrack.database import get_db
from bustrack.exceptions import NotFound, StoreError, ValidationError, error_body, validation_details
from bustrack.fleet.registry import FleetRegistry, get_fleet_registry
from bustrack.payments.gateway import PaymentGateway, get_payment_gateway
from bustrack.seats.allocator import generate_seat_map

router = APIRouter()

def _store_failure(message: str, error: StoreError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(message, error.details or error.message),
    )

# Booking Storage Endpoints
@router.post("/bookings", response_model=BookingCreateResponse)
def create_booking(
    payload: Dict[str, Any] = Body(..., description="Booking JSON"),
    db: Session = Depends(get_db)
):
    """Persist a booking confirmed by the client"""
    
    try:
        booking = Booking(**payload)
        BookingStore(db).create_booking(booking)
    except PydanticValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Failed to create booking", validation_details(e.errors())),
        )
    except StoreError as e:
        return _store_failure("Failed to create booking", e)
    
    return BookingCreateResponse(booking_id=booking.booking_id)

@router.get("/bookings/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    db: Session = Depends(get_db)
):
    """Get booking details by ID"""
    
    try:
        booking = BookingStore(db).get_booking(booking_id)
    except NotFound as e:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error_body(e.message))
    except StoreError as e:
        return _store_failure("Failed to fetch booking", e)
    
    return BookingResponse(booking=booking)

@router.get("/user-bookings/{email}", response_model=UserBookingsResponse)
def get_user_bookings(
    email: str,
    db: Session = Depends(get_db)
):
    """Get all bookings made with an email address, oldest first"""
    
    try:
        bookings = BookingStore(db).list_bookings_for_user(email)
    except StoreError as e:
        return _store_failure("Failed to fetch user bookings", e)
    
    return UserBookingsResponse(bookings=bookings)

@router.get("/booked-seats/{bus_id}/{journey_date}", response_model=BookedSeatsResponse)
def get_booked_seats(
    bus_id: str,
    journey_date: str,
    db: Session = Depends(get_db)
):
    """Get seats already taken on a bus for a journey date"""
    
    try:
        seats = BookingStore(db).get_booked_seats(bus_id, journey_date)
    except StoreError as e:
        return _store_failure("Failed to fetch booked seats", e)
    
    return BookedSeatsResponse(seats=seats)

# Server-side Checkout
@router.post("/bookings/checkout")
async def checkout(
    request: CheckoutRequest,
    db: Session = Depends(get_db),
    registry: FleetRegistry = Depends(get_fleet_registry),
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """Validate details and seats, take payment, and store the booking"""
    
    journey = request.journey
    vehicle = registry.get_vehicle(journey.bus_id)
    route = registry.get_route(vehicle.route_number)
    
    if journey.route_number != vehicle.route_number:
        raise ValidationError(f"Bus {vehicle.bus_id} does not serve route {journey.route_number}")
    
    stop_names = {stop.name for stop in route.stops}
    unknown_stops = [s for s in (journey.from_stop, journey.to_stop) if s and s not in stop_names]
    if unknown_stops:
        raise ValidationError("Stops are not on this route", unknown_stops)
    
    store = BookingStore(db)
    booked = await run_in_threadpool(store.get_booked_seats, vehicle.bus_id, journey.journey_date)
    
    seat_numbers = {seat.seat_number for seat in generate_seat_map(vehicle.capacity)}
    unknown_seats = [s for s in request.seats if s not in seat_numbers]
    if unknown_seats:
        raise ValidationError("Seats do not exist on this bus", unknown_seats)
    
    if len(set(request.seats)) != len(request.seats):
        raise ValidationError("Seat numbers must be unique")
    
    taken = [s for s in request.seats if s in booked]
    if taken:
        raise ValidationError("Seats are already booked", taken)
    
    if len(request.seats) > settings.MAX_SEATS_PER_BOOKING:
        raise ValidationError(f"At most {settings.MAX_SEATS_PER_BOOKING} seats can be booked at once")
    
    flow = BookingFlow(vehicle.capacity, booked, gateway=gateway)
    flow.submit_details(request.passenger, journey)
    for seat in request.seats:
        flow.toggle_seat(seat)
    flow.confirm_seats()
    booking = await flow.pay(request.provider, request.upi_id)
    await run_in_threadpool(store.create_booking, booking)
    
    return {
        "success": True,
        "booking_id": booking.booking_id,
        "message": "Booking confirmed successfully",
        "booking": booking,
    }
