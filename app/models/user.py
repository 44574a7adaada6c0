from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


DEFAULT_PREFERENCES = {
    "notifications": True,
    "priceAlerts": True,
    "emailUpdates": True,
}


class User(Base):
    """A user provisioned from Clerk. The id is Clerk's, never generated here."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String, index=True, nullable=False, default="")
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    profile_image_url = Column(String(1000), nullable=True)
    preferences = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    favorites = relationship(
        "UserFavorite",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    searches = relationship(
        "UserSearch",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
