"""Key/Value Store Model"""
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from database.base import Base


class KeyValueEntry(Base):
    """One whole serialized document per fixed storage key."""
    __tablename__ = "kv_store"
    key = Column(String(255), primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
