"""
Fleet Tracking Module

Live state of the bus fleet for the passenger map, the driver portal and
the admin dashboard.

Key Components:
- registry.py: owner of vehicle, route and notification state
- simulator.py: simulated GPS feed perturbing moving buses on a timer
- analytics.py: dashboard statistics
- seed_data.py: demo routes and buses provisioned at startup
- router.py: FastAPI endpoints for buses, routes, notifications and statistics
"""

from .router import router
from .registry import FleetRegistry, fleet_registry, get_fleet_registry
from .simulator import FleetSimulator
from .analytics import fleet_statistics
from .schemas import (
    Vehicle, VehicleView, VehicleStatus, OccupancyLevel, Route, Stop,
    Notification, FleetStatistics, StatusUpdateRequest
)

__all__ = [
    "router",
    "FleetRegistry",
    "fleet_registry",
    "get_fleet_registry",
    "FleetSimulator",
    "fleet_statistics",
    "Vehicle",
    "VehicleView",
    "VehicleStatus",
    "OccupancyLevel",
    "Route",
    "Stop",
    "Notification",
    "FleetStatistics",
    "StatusUpdateRequest"
]
