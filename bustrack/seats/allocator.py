"""
Seat grid generation and selection tracking.

Seats are laid out four per row in a 2-aisle-2 pattern. Labels are the row
number followed by the column letter ("1A" .. "1D", "2A", ...). Columns 1
and 4 are window seats, columns 2 and 3 sit on the aisle.
"""

from typing import Iterable, List, Optional

from bustrack.config import settings
from bustrack.exceptions import ValidationError
from bustrack.seats.schemas import Seat, SeatClass, SeatStatus

SEATS_PER_ROW = 4
COLUMN_LETTERS = "ABCD"


def seat_label(row: int, column: int) -> str:
    return f"{row}{COLUMN_LETTERS[column - 1]}"


def seat_class_for_column(column: int) -> SeatClass:
    if column in (1, SEATS_PER_ROW):
        return SeatClass.WINDOW
    if column in (2, SEATS_PER_ROW - 1):
        return SeatClass.AISLE
    return SeatClass.MIDDLE


def generate_seat_map(
    total_seats: int,
    booked_seats: Iterable[str] = (),
    selected_seats: Iterable[str] = (),
) -> List[Seat]:
    """Generate the ordered seat list for a vehicle.

    Booked wins over selected, selected wins over available.
    """
    if total_seats < 0:
        raise ValidationError("total_seats must not be negative")

    booked = set(booked_seats)
    selected = set(selected_seats)
    seats: List[Seat] = []

    row = 1
    while len(seats) < total_seats:
        for column in range(1, SEATS_PER_ROW + 1):
            if len(seats) == total_seats:
                break
            label = seat_label(row, column)
            if label in booked:
                seat_status = SeatStatus.BOOKED
            elif label in selected:
                seat_status = SeatStatus.SELECTED
            else:
                seat_status = SeatStatus.AVAILABLE
            seats.append(Seat(
                seat_number=label,
                status=seat_status,
                type=seat_class_for_column(column),
                row=row,
                column=column,
            ))
        row += 1

    return seats


def group_rows(seats: List[Seat]) -> List[List[Seat]]:
    """Group a flat seat list into rows for display"""
    rows: List[List[Seat]] = []
    for seat in seats:
        if not rows or rows[-1][0].row != seat.row:
            rows.append([])
        rows[-1].append(seat)
    return rows


def toggle_seat(
    seat_number: str,
    selected_seats: List[str],
    max_seats: Optional[int] = None,
    booked_seats: Iterable[str] = (),
) -> List[str]:
    """Toggle a seat in the current selection and return the new selection.

    Booked seats cannot be toggled. A new seat is only added while the
    selection is below `max_seats`. The input list is never mutated.
    """
    if max_seats is None:
        max_seats = settings.MAX_SEATS_PER_BOOKING

    if seat_number in set(booked_seats):
        return list(selected_seats)

    if seat_number in selected_seats:
        return [s for s in selected_seats if s != seat_number]

    if len(selected_seats) >= max_seats:
        return list(selected_seats)

    return list(selected_seats) + [seat_number]


def available_seat_numbers(seats: List[Seat]) -> List[str]:
    return [seat.seat_number for seat in seats if seat.status == SeatStatus.AVAILABLE]
