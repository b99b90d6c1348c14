"""Website model definitions."""

import enum
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.database import Base


class RiskLevel(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Website(Base):
    """Represents a monitored website entry."""
    __tablename__ = "websites"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False)
    risk_level = Column(
        Enum(RiskLevel, name="risk_level", values_callable=lambda levels: [level.value for level in levels]),
        nullable=False,
        default=RiskLevel.HIGH,
    )
    is_protected = Column(Boolean, nullable=False, default=False)
    date_added = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    creator = relationship("User", back_populates="websites")
