from pydantic import BaseModel
from typing import List
from enum import Enum

class SeatStatus(str, Enum):
    """Seat status enumeration"""
    AVAILABLE = "available"
    BOOKED = "booked"
    SELECTED = "selected"

class SeatClass(str, Enum):
    """Seat class enumeration"""
    WINDOW = "window"
    AISLE = "aisle"
    MIDDLE = "middle"  # Not produced by the 2-2 layout

class Seat(BaseModel):
    """Single seat in a vehicle seat map"""
    seat_number: str
    status: SeatStatus
    type: SeatClass
    row: int
    column: int

class SeatMap(BaseModel):
    """Seat grid for one vehicle on one journey date"""
    bus_id: str
    journey_date: str
    total_seats: int
    available_seats: int
    booked_seats: List[str]
    selected_seats: List[str] = []
    max_selectable: int
    rows: List[List[Seat]]
