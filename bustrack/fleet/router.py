from fastapi import APIRouter, Depends, Query
from typing import Optional

from bustrack.fleet.analytics import fleet_statistics
from bustrack.fleet.registry import FleetRegistry, get_fleet_registry, to_view
from bustrack.fleet.schemas import StatusUpdateRequest

router = APIRouter()

# Passenger Endpoints
@router.get("/buses")
def list_buses(
    route_number: Optional[str] = Query(None, description="Only buses on this route ('all' for every route)"),
    q: Optional[str] = Query(None, description="Match route number or driver name"),
    registry: FleetRegistry = Depends(get_fleet_registry)
):
    """List tracked buses with their live position and load"""
    
    buses = registry.search(route_number=route_number, query=q)
    return {"success": True, "buses": [to_view(bus) for bus in buses]}

@router.get("/buses/{bus_id}")
def get_bus(
    bus_id: str,
    registry: FleetRegistry = Depends(get_fleet_registry)
):
    """Get one bus by ID"""
    
    return {"success": True, "bus": to_view(registry.get_vehicle(bus_id))}

@router.get("/routes")
def list_routes(registry: FleetRegistry = Depends(get_fleet_registry)):
    """List routes with their stops"""
    
    return {"success": True, "routes": registry.list_routes()}

@router.get("/routes/{route_number}")
def get_route(
    route_number: str,
    registry: FleetRegistry = Depends(get_fleet_registry)
):
    """Get a route and the buses currently serving it"""
    
    route = registry.get_route(route_number)
    buses = registry.search(route_number=route_number)
    
    return {"success": True, "route": route, "buses": [to_view(bus) for bus in buses]}

@router.get("/notifications")
def list_notifications(registry: FleetRegistry = Depends(get_fleet_registry)):
    """Service notifications, newest first"""
    
    return {"success": True, "notifications": registry.notifications()}

# Driver Endpoints
@router.put("/buses/{bus_id}/status")
def update_bus_status(
    bus_id: str,
    update: StatusUpdateRequest,
    registry: FleetRegistry = Depends(get_fleet_registry)
):
    """Driver reports a new operational status"""
    
    bus = registry.update_status(bus_id, update.status, update.message)
    return {"success": True, "bus": to_view(bus)}

# Admin Endpoints
@router.get("/admin/statistics")
def get_fleet_statistics(registry: FleetRegistry = Depends(get_fleet_registry)):
    """Fleet-wide statistics for the admin dashboard"""
    
    stats = fleet_statistics(registry.snapshot(), registry.list_routes())
    return {"success": True, "statistics": stats}
