from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from app.schemas.property import CamelModel, FavoritedPropertyResponse


class FavoriteRequest(CamelModel):
    # Optional so a missing id is reported as 400 by the router, not as a validation error
    property_id: Optional[str] = None


class FavoriteStatusResponse(CamelModel):
    is_favorited: bool
    favorited_at: Optional[datetime] = None


class FavoriteListResponse(CamelModel):
    favorites: List[FavoritedPropertyResponse]
    message: str


class FavoriteSummaryItem(BaseModel):
    id: str
    address: str
    city: str
    state: str
    price: float
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    favorited_at: datetime


class FavoriteSummaryResponse(CamelModel):
    recent_favorites: List[FavoriteSummaryItem]
    total_count: int
    message: str


class MessageResponse(BaseModel):
    message: str
