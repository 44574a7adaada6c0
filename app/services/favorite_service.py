import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.favorite import UserFavorite
from app.models.property import Property
from app.models.user import User
from app.schemas.favorite import FavoriteStatusResponse, FavoriteSummaryItem
from app.schemas.property import FavoritedPropertyResponse
from app.services.property_service import (
    PropertyService,
    property_with_scores,
    to_property_response,
)

logger = logging.getLogger(__name__)

RECENT_FAVORITES_LIMIT = 3


class FavoriteService:
    """Keeps at most one favorite row per (user, property)."""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, user_id: str, property_id: str) -> Optional[UserFavorite]:
        return (
            self.db.query(UserFavorite)
            .filter(
                UserFavorite.user_id == user_id,
                UserFavorite.property_id == property_id,
            )
            .first()
        )

    def get_status(self, user_id: str, property_id: str) -> FavoriteStatusResponse:
        favorite = self._find(user_id, property_id)
        return FavoriteStatusResponse(
            is_favorited=favorite is not None,
            favorited_at=favorite.created_at if favorite else None,
        )

    def add(self, user_id: str, property_id: str) -> UserFavorite:
        if not PropertyService().property_exists(self.db, property_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Property not found"
            )

        # Fast path only; the unique constraint below is what actually decides.
        if self._find(user_id, property_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Property already in favorites",
            )

        favorite = UserFavorite(
            user_id=user_id,
            property_id=property_id,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(favorite)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self._find(user_id, property_id):
                logger.info(
                    "Concurrent duplicate favorite for user=%s property=%s",
                    user_id,
                    property_id,
                )
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Property already in favorites",
                )
            if self.db.get(User, user_id) is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
                )
            raise
        self.db.refresh(favorite)
        logger.info("User %s favorited property %s", user_id, property_id)
        return favorite

    def remove(self, user_id: str, property_id: str) -> None:
        result = self.db.execute(
            delete(UserFavorite).where(
                UserFavorite.user_id == user_id,
                UserFavorite.property_id == property_id,
            )
        )
        self.db.commit()
        if result.rowcount == 0:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Property not found in favorites",
            )
        logger.info("User %s removed favorite %s", user_id, property_id)

    def list_for_user(self, user_id: str) -> List[FavoritedPropertyResponse]:
        query = (
            property_with_scores()
            .add_columns(UserFavorite.created_at.label("favorited_at"))
            .join(UserFavorite, UserFavorite.property_id == Property.id)
            .where(UserFavorite.user_id == user_id)
            .order_by(UserFavorite.created_at.desc(), UserFavorite.id.asc())
        )
        return [
            FavoritedPropertyResponse(
                **to_property_response(row[:4]).model_dump(), favorited_at=row[4]
            )
            for row in self.db.execute(query).all()
        ]

    def summary(self, user_id: str):
        recent = self.db.execute(
            select(
                Property.id,
                Property.address,
                Property.city,
                Property.state,
                Property.price,
                Property.bedrooms,
                Property.bathrooms,
                UserFavorite.created_at.label("favorited_at"),
            )
            .join(UserFavorite, UserFavorite.property_id == Property.id)
            .where(UserFavorite.user_id == user_id)
            .order_by(UserFavorite.created_at.desc(), UserFavorite.id.asc())
            .limit(RECENT_FAVORITES_LIMIT)
        ).all()
        total = self.db.execute(
            select(func.count(UserFavorite.id)).where(UserFavorite.user_id == user_id)
        ).scalar_one()
        return [FavoriteSummaryItem(**row._mapping) for row in recent], total
