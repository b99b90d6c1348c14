"""User model definitions."""

from sqlalchemy import Column, Enum, Integer, String
from sqlalchemy.orm import relationship

from backend.database import Base

USER_ROLES = ("user", "admin")


class User(Base):
    """Represents an account that can own tracked websites."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    # Stored as given; see DESIGN.md before changing.
    password = Column(String, nullable=False)
    role = Column(Enum(*USER_ROLES, name="user_role"), nullable=False, default="user")

    websites = relationship("Website", back_populates="creator")
