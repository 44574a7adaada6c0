from fastapi import APIRouter, HTTPException, status

from app.dependencies import CurrentUser, db_dependency
from app.schemas.favorite import (
    FavoriteListResponse,
    FavoriteRequest,
    FavoriteStatusResponse,
    MessageResponse,
)
from app.services.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["favorites"])


def _require_property_id(body: FavoriteRequest) -> str:
    if not body.property_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Property ID is required"
        )
    return body.property_id


@router.get("", response_model=FavoriteListResponse)
def list_favorites(db: db_dependency, current_user: CurrentUser):
    return {
        "favorites": FavoriteService(db).list_for_user(current_user["id"]),
        "message": "Favorites retrieved successfully",
    }


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def add_favorite(db: db_dependency, current_user: CurrentUser, body: FavoriteRequest):
    FavoriteService(db).add(current_user["id"], _require_property_id(body))
    return {"message": "Property added to favorites successfully"}


@router.delete("", response_model=MessageResponse)
def remove_favorite(
    db: db_dependency, current_user: CurrentUser, body: FavoriteRequest
):
    FavoriteService(db).remove(current_user["id"], _require_property_id(body))
    return {"message": "Property removed from favorites successfully"}


@router.get("/{property_id}", response_model=FavoriteStatusResponse)
def get_favorite_status(db: db_dependency, current_user: CurrentUser, property_id: str):
    return FavoriteService(db).get_status(current_user["id"], property_id)
