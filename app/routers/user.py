from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from app.dependencies import CurrentUser, OwnerDependency, db_dependency
from app.schemas.favorite import FavoriteSummaryResponse
from app.schemas.user import (
    PreferencesResponse,
    PreferencesUpdate,
    SearchCreate,
    SearchCreatedResponse,
    SearchListResponse,
    UserQueryResponse,
    UserResponse,
)
from app.services.favorite_service import FavoriteService
from app.services.user_service import UserSearchService, UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserQueryResponse, response_model_exclude_none=True)
def find_users(
    db: db_dependency,
    current_user: CurrentUser,
    user_id: Optional[str] = Query(None, alias="userId"),
    email: Optional[str] = Query(None),
):
    """Look a user up by id or email, or list everyone newest first."""
    service = UserService(db)
    if user_id:
        return {"user": service.get_user(user_id)}
    if email:
        return {"user": service.get_user_by_email(email)}

    users = service.list_users()
    return {"users": users, "count": len(users)}


@router.get("/me", response_model=UserResponse)
def get_me(db: db_dependency, current_user: CurrentUser):
    return UserService(db).get_user(current_user["id"])


@router.get("/{user_id}/preferences", response_model=PreferencesResponse, response_model_exclude_none=True)
def get_preferences(user_id: str, db: db_dependency, owner: OwnerDependency):
    return {"preferences": UserService(db).get_user(user_id).preferences}


@router.put("/{user_id}/preferences", response_model=PreferencesResponse)
def update_preferences(
    user_id: str, db: db_dependency, owner: OwnerDependency, body: PreferencesUpdate
):
    if not isinstance(body.preferences, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Preferences must be an object",
        )
    user = UserService(db).update_preferences(user_id, body.preferences)
    return {
        "message": "Preferences updated successfully",
        "preferences": user.preferences,
    }


@router.get("/{user_id}/searches", response_model=SearchListResponse)
def get_recent_searches(user_id: str, db: db_dependency, owner: OwnerDependency):
    return {
        "searches": UserSearchService(db).recent_searches(user_id),
        "message": "Recent searches retrieved successfully",
    }


@router.post("/{user_id}/searches", response_model=SearchCreatedResponse)
def save_search(
    user_id: str, db: db_dependency, owner: OwnerDependency, body: SearchCreate
):
    if body.search_criteria is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search criteria is required",
        )
    search = UserSearchService(db).save_search(
        user_id, body.search_criteria, body.search_name
    )
    return {"search": search, "message": "Search saved successfully"}


@router.get("/{user_id}/favorites-summary", response_model=FavoriteSummaryResponse)
def get_favorites_summary(user_id: str, db: db_dependency, owner: OwnerDependency):
    recent, total = FavoriteService(db).summary(user_id)
    return {
        "recent_favorites": recent,
        "total_count": total,
        "message": "Favorites summary retrieved successfully",
    }
