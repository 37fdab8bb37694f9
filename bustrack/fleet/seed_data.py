"""Demo fleet provisioned at startup: routes, buses and service notices."""

from datetime import datetime
from typing import List

from bustrack.fleet.schemas import Notification, Route, Stop, Vehicle, VehicleStatus

def _stops(route_id: str, stops: List[tuple]) -> List[Stop]:
    return [
        Stop(stop_id=f"{route_id}-S{order}", name=name, latitude=lat, longitude=lng, order=order)
        for order, (name, lat, lng) in enumerate(stops, start=1)
    ]

def seed_routes() -> List[Route]:
    return [
        Route(
            route_id="R1",
            route_number="101",
            route_name="Majestic - Electronic City",
            start_point="Majestic",
            end_point="Electronic City",
            stops=_stops("R1", [
                ("Majestic", 12.9767, 77.5713),
                ("Town Hall", 12.9634, 77.5855),
                ("Lalbagh", 12.9507, 77.5848),
                ("Silk Board", 12.9177, 77.6238),
                ("Electronic City", 12.8452, 77.6602),
            ]),
            color="#2563eb",
        ),
        Route(
            route_id="R2",
            route_number="202",
            route_name="Shivajinagar - Whitefield",
            start_point="Shivajinagar",
            end_point="Whitefield",
            stops=_stops("R2", [
                ("Shivajinagar", 12.9857, 77.6057),
                ("Indiranagar", 12.9784, 77.6408),
                ("Marathahalli", 12.9591, 77.6974),
                ("Whitefield", 12.9698, 77.7500),
            ]),
            color="#16a34a",
        ),
        Route(
            route_id="R3",
            route_number="303",
            route_name="Yeshwanthpur - Banashankari",
            start_point="Yeshwanthpur",
            end_point="Banashankari",
            stops=_stops("R3", [
                ("Yeshwanthpur", 13.0280, 77.5409),
                ("Malleshwaram", 13.0035, 77.5709),
                ("Basavanagudi", 12.9422, 77.5760),
                ("Banashankari", 12.9255, 77.5468),
            ]),
            color="#dc2626",
        ),
    ]

def seed_vehicles() -> List[Vehicle]:
    now = datetime.now()
    return [
        Vehicle(bus_id="BUS001", route_number="101", driver_id="D001", driver_name="Ravi Kumar",
                current_status=VehicleStatus.RUNNING, capacity=40, current_occupancy=28,
                latitude=12.9634, longitude=77.5855, speed=32, last_updated=now),
        Vehicle(bus_id="BUS002", route_number="101", driver_id="D002", driver_name="Suresh Rao",
                current_status=VehicleStatus.DELAYED, capacity=40, current_occupancy=37,
                latitude=12.9177, longitude=77.6238, speed=12, last_updated=now),
        Vehicle(bus_id="BUS003", route_number="202", driver_id="D003", driver_name="Anil Shetty",
                current_status=VehicleStatus.RUNNING, capacity=48, current_occupancy=20,
                latitude=12.9784, longitude=77.6408, speed=38, last_updated=now),
        Vehicle(bus_id="BUS004", route_number="202", driver_id="D004", driver_name="Manjunath G",
                current_status=VehicleStatus.MAINTENANCE, capacity=48, current_occupancy=0,
                latitude=12.9698, longitude=77.7500, speed=0, last_updated=now),
        Vehicle(bus_id="BUS005", route_number="303", driver_id="D005", driver_name="Prakash N",
                current_status=VehicleStatus.RUNNING, capacity=36, current_occupancy=33,
                latitude=13.0035, longitude=77.5709, speed=27, last_updated=now),
        Vehicle(bus_id="BUS006", route_number="303", driver_id="D006", driver_name="Kiran Das",
                current_status=VehicleStatus.STOPPED, capacity=36, current_occupancy=5,
                latitude=12.9255, longitude=77.5468, speed=0, last_updated=now),
    ]

def seed_notifications() -> List[Notification]:
    now = datetime.now()
    return [
        Notification(id="N1", type="delay", bus_id="BUS002",
                     message="Route 101 running 10 minutes late near Silk Board", timestamp=now),
        Notification(id="N2", type="breakdown", bus_id="BUS004",
                     message="Bus BUS004 on route 202 is out of service for maintenance", timestamp=now),
    ]
