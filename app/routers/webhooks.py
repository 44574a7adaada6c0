from fastapi import APIRouter, Request, status

from app.dependencies import db_dependency
from app.limits import limiter
from app.services.clerk_webhook import ClerkWebhookService

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/clerk", status_code=status.HTTP_200_OK)
@limiter.limit("120/minute")
async def clerk_webhook(request: Request, db: db_dependency):
    service = ClerkWebhookService(db)
    event = await service.verify(request)
    return service.handle(event)
