from pydantic import BaseModel, Field, validator
from typing import List, Literal, Optional, Dict
from datetime import datetime
from enum import Enum

class VehicleStatus(str, Enum):
    """Vehicle operational status enumeration"""
    RUNNING = "Running"
    DELAYED = "Delayed"
    MAINTENANCE = "Maintenance"
    STOPPED = "Stopped"

class OccupancyLevel(str, Enum):
    """Passenger-facing crowding label"""
    AVAILABLE = "Available"
    MODERATE = "Moderate"
    CROWDED = "Crowded"

# Routes
class Stop(BaseModel):
    """Stop on a route"""
    stop_id: str
    name: str
    latitude: float
    longitude: float
    order: int

class Route(BaseModel):
    """Bus route with its ordered stops"""
    route_id: str
    route_number: str
    route_name: str
    start_point: str
    end_point: str
    stops: List[Stop]
    color: str

# Vehicles
class Vehicle(BaseModel):
    """Tracked bus with live position and load"""
    bus_id: str
    route_number: str
    driver_id: str
    driver_name: str
    current_status: VehicleStatus
    capacity: int = Field(..., ge=1)
    current_occupancy: int = Field(..., ge=0)
    latitude: float
    longitude: float
    speed: float = Field(..., ge=0)
    last_updated: datetime = Field(default_factory=datetime.now)
    
    @validator('current_occupancy')
    def validate_occupancy(cls, v, values):
        capacity = values.get('capacity')
        if capacity is not None and v > capacity:
            raise ValueError('Occupancy cannot exceed capacity')
        return v

class VehicleView(Vehicle):
    """Vehicle as shown to passengers, with derived occupancy figures"""
    occupancy_percentage: float
    occupancy_level: OccupancyLevel

class StatusUpdateRequest(BaseModel):
    """Driver status update"""
    status: VehicleStatus
    message: Optional[str] = None

# Notifications
class Notification(BaseModel):
    """Service notification shown to passengers"""
    id: str
    type: Literal["delay", "breakdown", "route-change", "info"]
    message: str
    bus_id: str
    timestamp: datetime = Field(default_factory=datetime.now)

# Dashboard
class RouteLoad(BaseModel):
    route_number: str
    name: str
    buses: int
    passengers: int

class FleetStatistics(BaseModel):
    """Fleet-wide figures for the admin dashboard"""
    total_buses: int
    running_buses: int
    delayed_buses: int
    maintenance_buses: int
    stopped_buses: int
    total_passengers: int
    average_speed: int
    route_load: List[RouteLoad] = []
    status_distribution: Dict[str, int] = {}
    generated_at: datetime = Field(default_factory=datetime.now)
