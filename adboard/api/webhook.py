"""
adboard/api/webhook.py

Purpose: Telegram webhook endpoint

- Receives Update objects pushed by Telegram
- Verifies the secret token header when one is configured
- Normalizes the update and passes control to the flow dispatcher
- Always acknowledges a valid update so Telegram does not redeliver it
"""

from typing import Optional

from fastapi import APIRouter, Header

from adboard.core.config import settings
from adboard.core.exceptions import AuthenticationError
from adboard.core.logging import get_logger
from adboard.flow.dispatcher import dispatch_event
from adboard.schemas.response import WebhookAck
from adboard.schemas.telegram import Update, parse_update

logger = get_logger(__name__)
router = APIRouter()

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


@router.post(settings.WEBHOOK_PATH, response_model=WebhookAck)
async def telegram_webhook(
    update: Update,
    secret_token: Optional[str] = Header(None, alias=SECRET_HEADER),
):
    """
    Webhook endpoint for Telegram updates.

    Handles private-chat messages and inline button presses; every other
    update type is acknowledged and ignored.
    """
    if settings.WEBHOOK_SECRET and secret_token != settings.WEBHOOK_SECRET:
        logger.warning(f"Rejected update {update.update_id}: bad secret token")
        raise AuthenticationError("Invalid webhook secret token")

    event = parse_update(update)

    if event is None:
        logger.debug(f"Ignoring update {update.update_id}")
        return WebhookAck(status="ignored")

    result = await dispatch_event(event)

    return WebhookAck(status="processed" if result["status"] == "success" else "failed")


@router.get(settings.WEBHOOK_PATH)
async def webhook_verification():
    """
    Lets operators check that the webhook route is reachable.
    """
    return {"status": "ok", "message": "Webhook endpoint is active"}
