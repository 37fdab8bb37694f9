from .router import router
from .allocator import generate_seat_map, toggle_seat, group_rows, available_seat_numbers
from .schemas import Seat, SeatMap, SeatStatus, SeatClass

__all__ = [
    "router",
    "generate_seat_map",
    "toggle_seat",
    "group_rows",
    "available_seat_numbers",
    "Seat",
    "SeatMap",
    "SeatStatus",
    "SeatClass",
]
