from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from bustrack.bookings.store import BookingStore
from bustrack.config import settings
from bustrack.database import get_db
from bustrack.fleet.registry import FleetRegistry, get_fleet_registry
from bustrack.seats.allocator import available_seat_numbers, generate_seat_map, group_rows
from bustrack.seats.schemas import SeatMap

router = APIRouter()

@router.get("/buses/{bus_id}/seat-map", response_model=SeatMap)
def get_seat_map(
    bus_id: str,
    journey_date: date = Query(..., alias="date", description="Journey date (YYYY-MM-DD)"),
    selected: Optional[str] = Query(None, description="Comma-separated seats currently selected"),
    registry: FleetRegistry = Depends(get_fleet_registry),
    db: Session = Depends(get_db)
):
    """Seat grid for a bus on a journey date, with booked seats marked"""
    
    vehicle = registry.get_vehicle(bus_id)
    booked = BookingStore(db).get_booked_seats(bus_id, journey_date)
    selected_seats = [s.strip() for s in selected.split(",") if s.strip()] if selected else []
    
    seats = generate_seat_map(vehicle.capacity, booked, selected_seats)
    
    return SeatMap(
        bus_id=bus_id,
        journey_date=journey_date.isoformat(),
        total_seats=vehicle.capacity,
        available_seats=len(available_seat_numbers(seats)),
        booked_seats=booked,
        selected_seats=selected_seats,
        max_selectable=settings.MAX_SEATS_PER_BOOKING,
        rows=group_rows(seats),
    )
