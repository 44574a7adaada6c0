from typing import Annotated, Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from starlette import status
from app.config import settings

# Session tokens are issued by Clerk; this service only verifies them.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_session_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.CLERK_JWT_KEY,
        algorithms=[settings.CLERK_JWT_ALGORITHM],
        options={"verify_aud": False},
    )


async def get_current_user(
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)
    ],
):
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )
    try:
        payload = decode_session_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )
    user_id: str = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )
    return {"id": user_id, "email": payload.get("email"), "session_id": payload.get("sid")}
