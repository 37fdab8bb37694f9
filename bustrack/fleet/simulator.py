import asyncio
import math
import logging
import random
from datetime import datetime
from typing import List, Optional

from bustrack.config import settings
from bustrack.fleet.registry import FleetRegistry
from bustrack.fleet.schemas import Vehicle, VehicleStatus

logger = logging.getLogger(__name__)

MOVING_STATUSES = (VehicleStatus.RUNNING, VehicleStatus.DELAYED)

class FleetSimulator:
    """Simulated GPS feed that nudges moving buses on a fixed interval"""
    
    def __init__(
        self,
        registry: FleetRegistry,
        interval_seconds: Optional[float] = None,
        max_speed: Optional[float] = None,
        position_jitter: Optional[float] = None,
        speed_jitter: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        self.registry = registry
        self.interval_seconds = interval_seconds if interval_seconds is not None else settings.FLEET_UPDATE_INTERVAL_SECONDS
        self.max_speed = max_speed if max_speed is not None else settings.FLEET_MAX_SPEED
        self.position_jitter = position_jitter if position_jitter is not None else settings.FLEET_POSITION_JITTER
        self.speed_jitter = speed_jitter if speed_jitter is not None else settings.FLEET_SPEED_JITTER
        self.rng = rng or random.Random()
        self._running = False
        self._task: Optional[asyncio.Task] = None
    
    @property
    def is_running(self) -> bool:
        return self._running
    
    def tick(self) -> List[Vehicle]:
        """Move every Running or Delayed bus once; returns the updated buses"""
        updated = []
        now = datetime.now()
        
        for vehicle in self.registry.snapshot():
            if vehicle.current_status not in MOVING_STATUSES:
                continue
            
            lat_change = (self.rng.random() - 0.5) * self.position_jitter
            lng_change = (self.rng.random() - 0.5) * self.position_jitter
            speed_change = math.floor((self.rng.random() - 0.5) * self.speed_jitter)
            
            moved = self.registry.update_vehicle(
                vehicle.bus_id,
                only_if_status=MOVING_STATUSES,
                latitude=vehicle.latitude + lat_change,
                longitude=vehicle.longitude + lng_change,
                speed=max(0, min(self.max_speed, vehicle.speed + speed_change)),
                last_updated=now,
            )
            if moved is not None:
                updated.append(moved)
        
        return updated
    
    async def run(self):
        """Tick until stopped"""
        self._running = True
        logger.info("Fleet simulation started (every %ss)", self.interval_seconds)
        try:
            while self._running:
                self.tick()
                await asyncio.sleep(self.interval_seconds)
        finally:
            self._running = False
            logger.info("Fleet simulation stopped")
    
    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task
    
    async def stop(self):
        self._running = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
