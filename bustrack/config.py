from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./bustrack.db"
    
    # Booking
    TICKET_PRICE: int = 25
    MAX_SEATS_PER_BOOKING: int = 5
    
    # Payment simulation
    PAYMENT_PROCESSING_SECONDS: float = 2.0
    
    # Fleet simulation
    FLEET_SIMULATION_ENABLED: bool = True
    FLEET_UPDATE_INTERVAL_SECONDS: float = 3.0
    FLEET_MAX_SPEED: int = 60
    FLEET_POSITION_JITTER: float = 0.002
    FLEET_SPEED_JITTER: int = 10
    
    # Application
    PROJECT_NAME: str = "BusTrack Transit API"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]
    
    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")
    
    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
