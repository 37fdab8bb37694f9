from pydantic import BaseModel, EmailStr, Field, validator
from typing import List, Optional
from datetime import datetime, date
from enum import Enum

from bustrack.payments.schemas import PaymentProvider, PaymentStatus

def _coerce_journey_date(value):
    # Browsers send the journey date as a full ISO timestamp
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value

class BookingStep(str, Enum):
    """Booking flow step enumeration"""
    DETAILS = "details"
    SEATS = "seats"
    PAYMENT = "payment"
    CONFIRMATION = "confirmation"
    ABANDONED = "abandoned"

# Booking Inputs
class PassengerDetails(BaseModel):
    """Passenger contact details as entered in the booking form"""
    name: str = ""
    email: str = ""
    phone: str = ""

class JourneyDetails(BaseModel):
    """Vehicle, stops and date of the journey being booked"""
    bus_id: str
    route_number: str
    from_stop: str = ""
    to_stop: str = ""
    journey_date: date
    
    @validator('journey_date', pre=True)
    def normalize_journey_date(cls, v):
        return _coerce_journey_date(v)

# Persisted Booking
class Booking(BaseModel):
    """Confirmed booking record as stored and returned by the API"""
    booking_id: str = Field(..., min_length=1)
    passenger_name: str = Field(..., min_length=1)
    passenger_email: EmailStr
    passenger_phone: str = Field(..., min_length=1)
    bus_id: str = Field(..., min_length=1)
    route_number: str
    from_stop: str
    to_stop: str
    seats: List[str]
    total_amount: float = Field(..., ge=0)
    booking_date: datetime = Field(default_factory=datetime.now)
    journey_date: date
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    
    @validator('journey_date', pre=True)
    def normalize_journey_date(cls, v):
        return _coerce_journey_date(v)
    
    @validator('seats')
    def validate_seats(cls, v):
        if not v:
            raise ValueError('At least one seat is required')
        if len(set(v)) != len(v):
            raise ValueError('Seat numbers must be unique')
        return v

# Request Models
class CheckoutRequest(BaseModel):
    """Server-side booking: details, seats and payment in one request"""
    passenger: PassengerDetails
    journey: JourneyDetails
    seats: List[str]
    provider: PaymentProvider = PaymentProvider.GPAY
    upi_id: Optional[str] = None

# Response Models
class BookingCreateResponse(BaseModel):
    success: bool = True
    booking_id: str
    message: str = "Booking confirmed successfully"

class BookingResponse(BaseModel):
    success: bool = True
    booking: Booking

class UserBookingsResponse(BaseModel):
    success: bool = True
    bookings: List[Booking] = []

class BookedSeatsResponse(BaseModel):
    success: bool = True
    seats: List[str] = []
