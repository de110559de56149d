"""
Clerk webhook receiver.

Clerk delivers user lifecycle events through Svix. We verify the Svix
signature against CLERK_WEBHOOK_SECRET before trusting the payload, then:
- user.created / user.updated -> sync the profile
- user.deleted -> delete the user's content and profile
Other event types are acknowledged and ignored.
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from svix.webhooks import Webhook, WebhookVerificationError

from dreamdesk.api.deps import get_user_sync
from dreamdesk.config import get_settings
from dreamdesk.models.user import IdentityUser
from dreamdesk.services.user_sync import UserSyncService

logger = logging.getLogger(__name__)
router = APIRouter()

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


@router.post("/clerk", summary="Clerk user lifecycle webhook")
async def clerk_webhook(
    request: Request,
    user_sync: Annotated[UserSyncService, Depends(get_user_sync)],
) -> Dict[str, str]:
    secret = get_settings().clerk_webhook_secret
    if not secret:
        logger.error("Missing CLERK_WEBHOOK_SECRET environment variable")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Missing webhook secret")

    headers = {name: request.headers.get(name) for name in SVIX_HEADERS}
    if not all(headers.values()):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing svix headers")

    payload = await request.body()
    try:
        event: Dict[str, Any] = Webhook(secret).verify(payload, headers)
    except WebhookVerificationError as e:
        logger.warning("Error verifying webhook: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook signature")

    event_type = event.get("type")
    data = event.get("data") or {}
    try:
        if event_type in ("user.created", "user.updated"):
            await user_sync.sync_profile(IdentityUser.model_validate(data))
            logger.info("User %s: %s", event_type, data.get("id"))
        elif event_type == "user.deleted":
            await user_sync.delete_user(data["id"])
            logger.info("User deleted: %s", data.get("id"))
        else:
            logger.info("Unhandled webhook event: %s", event_type)
    except Exception as e:
        logger.exception("Error processing webhook %s: %s", event_type, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error processing webhook")

    return {"message": "Webhook processed successfully"}
