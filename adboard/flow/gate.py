"""
adboard/flow/gate.py

Purpose: Location gate

- Runs before any other routing
- Blocks every action except /start, /setlocation and /cancel until the
  user's location is known
- Captures the location from the next plain text message
"""

from typing import Any, Dict, List, Optional

from adboard.models.session import ConversationSession
from adboard.models.user import Location, User
from adboard.schemas.telegram import EventKind, InboundEvent
from adboard.services.user_service import update_user_location
from adboard.core.logging import get_logger
from utils.constants import (
    LOCATION_GATE_ALLOWED_COMMANDS,
    LOCATION_INVALID_MESSAGE,
    LOCATION_REQUIRED_WARNING,
    LOCATION_SAVED_MESSAGE,
)
from utils.telegram_utils import create_text_message, escape_html, main_menu_keyboard, remove_keyboard
from utils.validation_utils import parse_location

logger = get_logger(__name__)


def is_awaiting_location(session: ConversationSession, user: Optional[User]) -> bool:
    """
    Location input is pending when explicitly requested, or when the user
    has no confirmed location at all.
    """
    if session.awaiting_location:
        return True
    return user is None or not user.location.is_set


async def apply_location_gate(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> Optional[List[Dict[str, Any]]]:
    """
    Intercepts events while location input is pending.

    Args:
        event: Inbound event
        session: Conversation context
        user: Stored user, if any

    Returns:
        None to let the event through, otherwise the replies that end it
    """
    if not is_awaiting_location(session, user):
        return None

    if event.kind == EventKind.COMMAND and event.command in LOCATION_GATE_ALLOWED_COMMANDS:
        return None

    if event.kind == EventKind.TEXT:
        return await capture_location(event, session)

    logger.info(f"Blocked {event.describe()} until location is set")
    return [create_text_message(LOCATION_REQUIRED_WARNING, remove_keyboard())]


async def capture_location(event: InboundEvent, session: ConversationSession) -> List[Dict[str, Any]]:
    """
    Parses a plain text message as a location and stores it.
    """
    parsed = parse_location(event.text)

    if parsed is None:
        logger.info("Rejected unparseable location input")
        return [create_text_message(LOCATION_INVALID_MESSAGE, remove_keyboard())]

    country, city = parsed
    user = await update_user_location(event.chat_id, Location(country=country, city=city))
    session.awaiting_location = False

    return [
        create_text_message(
            LOCATION_SAVED_MESSAGE.format(location=escape_html(user.location.display())),
            main_menu_keyboard()
        )
    ]
