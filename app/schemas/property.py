from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional
from datetime import datetime
from app.models.property import PropertyType


class CamelModel(BaseModel):
    """Snake-case attributes in Python, camelCase keys on the wire."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PropertyResponse(CamelModel):
    id: str
    address: str
    city: str
    state: str
    zip_code: str
    price: float
    square_feet: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    year_built: Optional[int] = None
    property_type: Optional[PropertyType] = None
    days_on_market: Optional[int] = None
    price_per_sqft: Optional[float] = None
    listing_status: Optional[str] = None
    features: Optional[Any] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    walk_score: int = 0
    bike_score: int = 0
    transit_score: int = 0


class FavoritedPropertyResponse(PropertyResponse):
    favorited_at: datetime


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_next_page: bool
    has_prev_page: bool


class PropertyListResponse(CamelModel):
    properties: List[PropertyResponse]
    pagination: Pagination


class PropertyDetailResponse(CamelModel):
    property: PropertyResponse
    message: str


class PropertyCountResponse(CamelModel):
    count: int
    message: str
