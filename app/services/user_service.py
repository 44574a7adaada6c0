import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.user import DEFAULT_PREFERENCES, User
from app.models.user_search import UserSearch

logger = logging.getLogger(__name__)

RECENT_SEARCHES_LIMIT = 5


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
            )
        return user

    def get_user_by_email(self, email: str) -> User:
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
            )
        return user

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.asc()).all()

    def create_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> User:
        user = User(
            id=user_id,
            email=email or "",
            first_name=first_name or None,
            last_name=last_name or None,
            phone=phone or None,
            profile_image_url=profile_image_url or None,
            preferences=dict(DEFAULT_PREFERENCES),
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="User already exists"
            )
        self.db.refresh(user)
        logger.info("User created in database: %s", user.id)
        return user

    def update_user(self, user_id: str, **fields) -> User:
        """Apply only the fields that carry a value; ``None`` leaves a column untouched."""
        user = self.get_user(user_id)
        for key, value in fields.items():
            if value is not None:
                setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        logger.info("User updated in database: %s", user.id)
        return user

    def delete_user(self, user_id: str) -> None:
        user = self.get_user(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info("User deleted from database: %s", user_id)

    def update_preferences(self, user_id: str, preferences: dict) -> User:
        user = self.get_user(user_id)
        user.preferences = preferences
        self.db.commit()
        self.db.refresh(user)
        return user


class UserSearchService:
    def __init__(self, db: Session):
        self.db = db

    def recent_searches(self, user_id: str) -> List[UserSearch]:
        return (
            self.db.query(UserSearch)
            .filter(UserSearch.user_id == user_id)
            .order_by(UserSearch.created_at.desc(), UserSearch.id.asc())
            .limit(RECENT_SEARCHES_LIMIT)
            .all()
        )

    def save_search(
        self, user_id: str, search_criteria: dict, search_name: Optional[str] = None
    ) -> UserSearch:
        search = UserSearch(
            user_id=user_id,
            search_criteria=search_criteria,
            search_name=search_name or None,
            is_saved=False,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(search)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
            )
        self.db.refresh(search)
        return search
