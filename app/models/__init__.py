# Import all models so they're registered with Base.metadata
from app.models.user import User
from app.models.property import Property, Neighborhood
from app.models.favorite import UserFavorite
from app.models.user_search import UserSearch

__all__ = [
    "User",
    "Property",
    "Neighborhood",
    "UserFavorite",
    "UserSearch",
]
