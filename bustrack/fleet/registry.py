import logging
import threading
import uuid
from collections import deque
from datetime import datetime
from typing import Deque, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from bustrack.exceptions import NotFound, ValidationError
from bustrack.fleet.schemas import (
    Notification, OccupancyLevel, Route, Vehicle, VehicleStatus, VehicleView
)
from bustrack.fleet.seed_data import seed_notifications, seed_routes, seed_vehicles

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 100

STATUS_NOTIFICATION_TYPES = {
    VehicleStatus.DELAYED: "delay",
    VehicleStatus.MAINTENANCE: "breakdown",
    VehicleStatus.STOPPED: "info",
}

def occupancy_percentage(vehicle: Vehicle) -> float:
    return round(vehicle.current_occupancy / vehicle.capacity * 100, 1)

def occupancy_level(vehicle: Vehicle) -> OccupancyLevel:
    percentage = vehicle.current_occupancy / vehicle.capacity * 100
    if percentage >= 90:
        return OccupancyLevel.CROWDED
    if percentage >= 70:
        return OccupancyLevel.MODERATE
    return OccupancyLevel.AVAILABLE

def to_view(vehicle: Vehicle) -> VehicleView:
    return VehicleView(
        **vehicle.model_dump(),
        occupancy_percentage=occupancy_percentage(vehicle),
        occupancy_level=occupancy_level(vehicle),
    )

class FleetRegistry:
    """Owner of the live fleet state.
    
    Readers get copies through `snapshot` and the getters. Every vehicle
    change, whether from the simulator or a driver, goes through
    `update_vehicle`.
    """
    
    def __init__(
        self,
        vehicles: List[Vehicle],
        routes: List[Route],
        notifications: Optional[List[Notification]] = None,
    ):
        self._lock = threading.Lock()
        self._vehicles: Dict[str, Vehicle] = {v.bus_id: v for v in vehicles}
        self._routes: Dict[str, Route] = {r.route_number: r for r in routes}
        self._notifications: Deque[Notification] = deque(notifications or [], maxlen=MAX_NOTIFICATIONS)
    
    @classmethod
    def from_seed(cls) -> "FleetRegistry":
        return cls(seed_vehicles(), seed_routes(), seed_notifications())
    
    # Vehicles
    def snapshot(self) -> List[Vehicle]:
        """Copy of every vehicle in provisioning order"""
        with self._lock:
            return [v.model_copy(deep=True) for v in self._vehicles.values()]
    
    def get_vehicle(self, bus_id: str) -> Vehicle:
        with self._lock:
            vehicle = self._vehicles.get(bus_id)
            if vehicle is None:
                raise NotFound(f"Bus {bus_id} not found")
            return vehicle.model_copy(deep=True)
    
    def update_vehicle(
        self,
        bus_id: str,
        only_if_status: Optional[Iterable[VehicleStatus]] = None,
        **changes
    ) -> Optional[Vehicle]:
        """Apply field changes to one vehicle and stamp the update time.
        
        With `only_if_status`, the change is skipped and None returned when
        the vehicle is no longer in one of those statuses.
        """
        with self._lock:
            vehicle = self._vehicles.get(bus_id)
            if vehicle is None:
                raise NotFound(f"Bus {bus_id} not found")
            if only_if_status is not None and vehicle.current_status not in only_if_status:
                return None
            
            data = vehicle.model_dump()
            data.update(changes)
            if "last_updated" not in changes:
                data["last_updated"] = datetime.now()
            
            try:
                updated = Vehicle(**data)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid update for bus {bus_id}", str(e)) from e
            
            self._vehicles[bus_id] = updated
            return updated.model_copy(deep=True)
    
    def update_status(self, bus_id: str, status: VehicleStatus, message: Optional[str] = None) -> Vehicle:
        """Driver status change; disruptive statuses raise a passenger notification"""
        previous = self.get_vehicle(bus_id)
        vehicle = self.update_vehicle(bus_id, current_status=status)
        
        if status != previous.current_status and status in STATUS_NOTIFICATION_TYPES:
            self.add_notification(
                STATUS_NOTIFICATION_TYPES[status],
                message or f"Bus {bus_id} on route {vehicle.route_number} is now {status.value}",
                bus_id,
            )
        
        logger.info("Bus %s status %s -> %s", bus_id, previous.current_status.value, status.value)
        return vehicle
    
    def search(self, route_number: Optional[str] = None, query: Optional[str] = None) -> List[Vehicle]:
        """Filter buses by route and by a free-text match on route number or driver name"""
        vehicles = self.snapshot()
        
        if route_number and route_number != "all":
            vehicles = [v for v in vehicles if v.route_number == route_number]
        
        if query:
            needle = query.lower()
            vehicles = [
                v for v in vehicles
                if needle in v.route_number.lower() or needle in v.driver_name.lower()
            ]
        
        return vehicles
    
    # Routes
    def list_routes(self) -> List[Route]:
        return list(self._routes.values())
    
    def get_route(self, route_number: str) -> Route:
        route = self._routes.get(route_number)
        if route is None:
            raise NotFound(f"Route {route_number} not found")
        return route
    
    # Notifications
    def add_notification(self, notification_type: str, message: str, bus_id: str) -> Notification:
        notification = Notification(
            id=str(uuid.uuid4()),
            type=notification_type,
            message=message,
            bus_id=bus_id,
        )
        with self._lock:
            self._notifications.append(notification)
        return notification
    
    def notifications(self) -> List[Notification]:
        """Notifications, newest first"""
        with self._lock:
            return sorted(self._notifications, key=lambda n: n.timestamp, reverse=True)

fleet_registry = FleetRegistry.from_seed()

def get_fleet_registry() -> FleetRegistry:
    return fleet_registry
