"""
adboard/flow/handlers/commands.py

Handles: /start, /setlocation, /cancel

- Creates the user on first contact
- Starts location capture when the location is unknown
- /cancel clears pending location input and any ad draft
"""

from typing import Any, Dict, List, Optional

from adboard.models.session import ConversationSession
from adboard.models.user import User
from adboard.schemas.telegram import InboundEvent
from adboard.services.session_service import end_submission
from adboard.services.user_service import get_or_create_user
from adboard.core.logging import get_logger, LogContext
from utils.constants import (
    ASK_LOCATION_MESSAGE,
    CANCELLED_MESSAGE,
    LOCATION_MISSING_MESSAGE,
    WELCOME_MESSAGE,
)
from utils.telegram_utils import create_text_message, main_menu_keyboard, remove_keyboard

logger = get_logger(__name__)


async def handle_start(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Entry point. Shows the menu, or asks for the location first.
    """
    with LogContext(user_id=event.chat_id, state="START"):
        user = await get_or_create_user(event.chat_id)

        if not user.location.is_set:
            logger.info("Location unknown, starting location capture")
            session.awaiting_location = True
            return [create_text_message(ASK_LOCATION_MESSAGE, remove_keyboard())]

        session.awaiting_location = False
        return [create_text_message(WELCOME_MESSAGE, main_menu_keyboard())]


async def handle_set_location(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """Asks for a new location; the gate captures the answer."""
    session.awaiting_location = True
    return [create_text_message(ASK_LOCATION_MESSAGE, remove_keyboard())]


async def handle_cancel(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Global escape: drops pending location input and any ad draft.
    """
    with LogContext(user_id=event.chat_id, state=session.state.value):
        session.awaiting_location = False
        end_submission(session, "cancelled by user")

        if user is None or not user.location.is_set:
            return [
                create_text_message(CANCELLED_MESSAGE, remove_keyboard()),
                create_text_message(LOCATION_MISSING_MESSAGE),
            ]

        return [create_text_message(CANCELLED_MESSAGE, main_menu_keyboard())]
