from sqlalchemy import Column, String, DateTime, Text
from datetime import datetime
from .database import Base
import enum


class Unit(str, enum.Enum):
    INCH = "in"
    MILLIMETER = "mm"


class ThemeMode(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class StoredValue(Base):
    """One persisted key/value pair. Values are JSON text, keys are namespaced."""
    __tablename__ = "stored_values"

    key = Column(String, primary_key=True)
    value_json = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
