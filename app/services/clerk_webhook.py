import logging

from fastapi import HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session
from svix.webhooks import Webhook, WebhookVerificationError

from app.config import settings
from app.schemas.user import ClerkEvent, ClerkUserData
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class ClerkWebhookService:
    def __init__(self, db: Session):
        self.db = db

    async def verify(self, request: Request) -> ClerkEvent:
        """Check the svix signature. Nothing is written before this passes."""
        headers = {name: request.headers.get(name) for name in SVIX_HEADERS}
        if not all(headers.values()):
            raise HTTPException(status_code=400, detail="Missing svix headers")

        if not settings.CLERK_WEBHOOK_SECRET:
            raise HTTPException(status_code=500, detail="Clerk webhook secret missing")

        payload = await request.body()
        try:
            event = Webhook(settings.CLERK_WEBHOOK_SECRET).verify(payload, headers)
        except WebhookVerificationError as exc:
            logger.warning("Rejected Clerk webhook: %s", exc)
            raise HTTPException(status_code=400, detail="Invalid webhook signature")

        try:
            return ClerkEvent.model_validate(event)
        except ValidationError:
            raise HTTPException(status_code=400, detail="Malformed webhook payload")

    def handle(self, event: ClerkEvent) -> dict:
        users = UserService(self.db)

        if event.type in ("user.created", "user.updated"):
            try:
                data = ClerkUserData.model_validate(event.data)
            except ValidationError:
                raise HTTPException(status_code=400, detail="Malformed user payload")

            if event.type == "user.created":
                users.create_user(
                    data.id,
                    email=data.primary_email,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    phone=data.primary_phone,
                    profile_image_url=data.image_url,
                )
            else:
                users.update_user(
                    data.id,
                    email=data.primary_email or None,
                    first_name=data.first_name or None,
                    last_name=data.last_name or None,
                    phone=data.primary_phone or None,
                    profile_image_url=data.image_url or None,
                )
        elif event.type == "user.deleted":
            user_id = event.data.get("id")
            if not user_id:
                raise HTTPException(status_code=400, detail="Malformed user payload")
            users.delete_user(user_id)
        else:
            logger.info("Unhandled Clerk event type: %s", event.type)
            return {"message": "Webhook ignored"}

        return {"message": "Webhook processed successfully"}
