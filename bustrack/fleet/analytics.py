from collections import Counter
from typing import List

from bustrack.fleet.schemas import FleetStatistics, Route, RouteLoad, Vehicle, VehicleStatus

def route_load(vehicles: List[Vehicle], routes: List[Route]) -> List[RouteLoad]:
    """Bus and passenger counts per route"""
    load = []
    for route in routes:
        route_buses = [v for v in vehicles if v.route_number == route.route_number]
        load.append(RouteLoad(
            route_number=route.route_number,
            name=f"Route {route.route_number}",
            buses=len(route_buses),
            passengers=sum(v.current_occupancy for v in route_buses),
        ))
    return load

def fleet_statistics(vehicles: List[Vehicle], routes: List[Route]) -> FleetStatistics:
    """Summary figures for the admin dashboard"""
    counts = Counter(v.current_status for v in vehicles)
    average_speed = round(sum(v.speed for v in vehicles) / len(vehicles)) if vehicles else 0
    
    return FleetStatistics(
        total_buses=len(vehicles),
        running_buses=counts[VehicleStatus.RUNNING],
        delayed_buses=counts[VehicleStatus.DELAYED],
        maintenance_buses=counts[VehicleStatus.MAINTENANCE],
        stopped_buses=counts[VehicleStatus.STOPPED],
        total_passengers=sum(v.current_occupancy for v in vehicles),
        average_speed=average_speed,
        route_load=route_load(vehicles, routes),
        status_distribution={status.value: counts[status] for status in VehicleStatus},
    )
