from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Float,
    DateTime,
    ForeignKey,
    JSON,
    Enum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import enum
import uuid


def _uuid() -> str:
    return str(uuid.uuid4())


class PropertyType(str, enum.Enum):
    SINGLE_FAMILY = "single_family"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    MULTI_FAMILY = "multi_family"


class ListingStatus(str, enum.Enum):
    """Known listing states. The column itself stays a plain string."""

    ACTIVE = "active"
    SOLD = "sold"
    PENDING = "pending"


class Neighborhood(Base):
    __tablename__ = "neighborhoods"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    walk_score = Column(Integer, nullable=False, default=0)
    bike_score = Column(Integer, nullable=False, default=0)
    transit_score = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    properties = relationship("Property", back_populates="neighborhood")


class Property(Base):
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=_uuid)

    # Location
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    neighborhood_id = Column(
        String(36),
        ForeignKey("neighborhoods.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Listing
    price = Column(Float, nullable=False, index=True)
    property_type = Column(
        Enum(
            PropertyType,
            values_callable=lambda obj: [e.value for e in obj],
            native_enum=False,
        ),
        nullable=True,
        index=True,
    )
    listing_status = Column(String(20), nullable=False, default=ListingStatus.ACTIVE.value, index=True)
    days_on_market = Column(Integer, nullable=True)
    price_per_sqft = Column(Float, nullable=True)

    # Property Details
    square_feet = Column(Integer, nullable=True)
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Float, nullable=True)
    year_built = Column(Integer, nullable=True)
    features = Column(JSON, nullable=True)  # {"garage": true, "pool": false}
    description = Column(Text, nullable=True)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    neighborhood = relationship("Neighborhood", back_populates="properties")
    favorites = relationship(
        "UserFavorite", back_populates="property", passive_deletes=True
    )
