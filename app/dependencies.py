from typing import Annotated

from fastapi import Depends, HTTPException
from starlette import status
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.services.auth_service import get_current_user


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[dict, Depends(get_current_user)]


def require_same_user(user_id: str, current_user: CurrentUser) -> dict:
    """Per-user resources are only visible to the user they belong to."""
    if current_user.get("id") != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return current_user


OwnerDependency = Annotated[dict, Depends(require_same_user)]
