import logging
from datetime import date
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from bustrack.bookings.schemas import Booking
from bustrack.exceptions import NotFound
from bustrack.store.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

def booking_key(booking_id: str) -> str:
    return f"booking:{booking_id}"

def user_bookings_key(email: str) -> str:
    return f"user_bookings:{email}"

def bus_seats_key(bus_id: str, journey_date: Union[date, str]) -> str:
    if isinstance(journey_date, date):
        journey_date = journey_date.isoformat()
    else:
        journey_date = journey_date.split("T", 1)[0]
    return f"bus_seats:{bus_id}:{journey_date}"

class BookingStore:
    """Persistence for bookings and their lookup indexes.
    
    Three keys describe a booking:
    - booking:<id> holds the record itself
    - user_bookings:<email> lists booking ids in creation order
    - bus_seats:<bus_id>:<date> holds the seats taken on that journey
    
    `create_booking` writes all three in one transaction.
    """
    
    def __init__(self, db: Session):
        self.kv = KeyValueStore(db)
    
    def create_booking(self, booking: Booking) -> Booking:
        """Persist a booking and update the user and seat indexes"""
        
        user_key = user_bookings_key(booking.passenger_email)
        seats_key = bus_seats_key(booking.bus_id, booking.journey_date)
        existing_ids, existing_seats = self.kv.mget([user_key, seats_key])
        
        booking_ids = list(existing_ids or [])
        booking_ids.append(booking.booking_id)
        
        # Merge while keeping first-seen order
        seats = list(existing_seats or [])
        for seat in booking.seats:
            if seat not in seats:
                seats.append(seat)
        
        self.kv.mset({
            booking_key(booking.booking_id): booking.model_dump(mode="json"),
            user_key: booking_ids,
            seats_key: seats,
        })
        
        logger.info(
            "Booking %s stored for bus %s on %s, seats %s",
            booking.booking_id, booking.bus_id, booking.journey_date, ",".join(booking.seats)
        )
        return booking
    
    def find_booking(self, booking_id: str) -> Optional[Booking]:
        """Get booking by ID, None when it does not exist"""
        data = self.kv.get(booking_key(booking_id))
        return Booking(**data) if data else None
    
    def get_booking(self, booking_id: str) -> Booking:
        """Get booking by ID or raise NotFound"""
        booking = self.find_booking(booking_id)
        if booking is None:
            raise NotFound("Booking not found")
        return booking
    
    def list_bookings_for_user(self, email: str) -> List[Booking]:
        """Get a user's bookings in creation order, skipping missing records"""
        booking_ids = self.kv.get(user_bookings_key(email)) or []
        records = self.kv.mget([booking_key(booking_id) for booking_id in booking_ids])
        
        bookings = []
        for booking_id, data in zip(booking_ids, records):
            if data is None:
                logger.warning("User %s references missing booking %s", email, booking_id)
                continue
            bookings.append(Booking(**data))
        return bookings
    
    def get_booked_seats(self, bus_id: str, journey_date: Union[date, str]) -> List[str]:
        """Get seats already booked on a bus for a journey date"""
        return list(self.kv.get(bus_seats_key(bus_id, journey_date)) or [])
