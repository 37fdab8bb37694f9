import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from bustrack.config import settings
from bustrack.database import init_db
from bustrack.exceptions import register_exception_handlers
from bustrack.logging_config import configure_logging
from bustrack.bookings import router as bookings_router
from bustrack.fleet import router as fleet_router
from bustrack.fleet.registry import fleet_registry
from bustrack.fleet.simulator import FleetSimulator
from bustrack.payments import router as payments_router
from bustrack.seats import router as seats_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("bustrack.http")

fleet_simulator = FleetSimulator(fleet_registry)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.FLEET_SIMULATION_ENABLED:
        fleet_simulator.start()
    yield
    await fleet_simulator.stop()

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Bus tracking and ticket booking API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
    max_age=600,
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response

register_exception_handlers(app)

# Include routers
app.include_router(bookings_router, tags=["Bookings"])
app.include_router(seats_router, tags=["Seats"])
app.include_router(fleet_router, tags=["Fleet"])
app.include_router(payments_router, prefix="/payments", tags=["Payments"])

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": settings.PROJECT_NAME,
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
