from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from bustrack.database import Base

# ================================
# Key-Value Storage
# ================================
class KVEntry(Base):
    __tablename__ = "kv_store"
    
    key = Column(String(255), primary_key=True, index=True)
    value = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
