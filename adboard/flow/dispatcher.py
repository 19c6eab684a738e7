"""
adboard/flow/dispatcher.py

Purpose: Central routing for inbound events

- Loads the conversation context and the user
- Applies the location gate before anything else
- Routes to the submission flow or the top-level handlers
- Persists the context only when it changed
- Sends the replies and acknowledges button presses
"""

from typing import Any, Dict, List, Optional

from adboard.models.session import ConversationSession
from adboard.models.user import User
from adboard.schemas.telegram import EventKind, InboundEvent
from adboard.flow.gate import apply_location_gate
from adboard.flow.handlers.commands import handle_cancel, handle_set_location, handle_start
from adboard.flow.handlers.listing import handle_filter_selected, handle_show_more
from adboard.flow.handlers.menu import route_menu
from adboard.flow.handlers.submission import handle_submission_event
from adboard.services.session_service import load_session, save_session
from adboard.services.telegram_service import get_telegram_service
from adboard.services.user_service import get_user
from adboard.core.exceptions import ExternalServiceError
from adboard.core.logging import get_logger, LogContext
from utils.constants import (
    CATEGORY_CALLBACK_PREFIX,
    COMMAND_CANCEL,
    COMMAND_SET_LOCATION,
    COMMAND_START,
    FILTER_CALLBACK_PREFIX,
    GENERIC_ERROR_MESSAGE,
    MORE_ADS_CALLBACK,
    PUBLISH_WITHOUT_MEDIA_CALLBACK,
    STALE_BUTTON_MESSAGE,
    SUBMISSION_EXPIRED_MESSAGE,
    UNKNOWN_COMMAND_MESSAGE,
    USE_MENU_MESSAGE,
)
from utils.telegram_utils import create_text_message, main_menu_keyboard

logger = get_logger(__name__)

COMMAND_HANDLERS = {
    COMMAND_START: handle_start,
    COMMAND_SET_LOCATION: handle_set_location,
}


async def dispatch_event(event: InboundEvent) -> Dict[str, Any]:
    """
    Handles one inbound event end to end.

    Args:
        event: Normalized Telegram event

    Returns:
        Dict with processing status
    """
    with LogContext(user_id=event.chat_id):
        logger.info(f"📨 Dispatching {event.describe()}")

        try:
            replies = await process_event(event)
            status = "success"

        except Exception as e:
            logger.error(f"❌ Error handling {event.describe()}: {e}", exc_info=True)
            replies = [create_text_message(GENERIC_ERROR_MESSAGE, main_menu_keyboard())]
            status = "error"

        if event.callback_id:
            await acknowledge_callback(event.callback_id)

        await send_replies(event.chat_id, replies)

        return {"status": status, "replies": len(replies)}


async def process_event(event: InboundEvent) -> List[Dict[str, Any]]:
    """
    Runs the event through the gate and routers, then saves the context.
    """
    session, draft_expired = await load_session(event.chat_id)
    before = session.snapshot()
    # Any event during a submission counts as activity for the draft timeout
    drafting = session.in_submission

    replies = []
    if draft_expired:
        replies.append(create_text_message(SUBMISSION_EXPIRED_MESSAGE, main_menu_keyboard()))

    replies.extend(await route_event(event, session))

    if draft_expired or drafting or session.snapshot() != before:
        await save_session(session)

    return replies


async def route_event(event: InboundEvent, session: ConversationSession) -> List[Dict[str, Any]]:
    """
    Routes an event to the right handler.

    Order: location gate, /cancel, open submission, top-level handlers.
    """
    user = await get_user(event.chat_id)

    gated = await apply_location_gate(event, session, user)
    if gated is not None:
        return gated

    if event.is_command(COMMAND_CANCEL):
        return await handle_cancel(event, session, user)

    if session.in_submission:
        return await handle_submission_event(event, session, user)

    return await route_idle_event(event, session, user)


async def route_idle_event(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    """
    Handles events when no submission is open.
    """
    if event.kind == EventKind.COMMAND:
        handler = COMMAND_HANDLERS.get(event.command)
        if handler is None:
            logger.info(f"Unknown command: /{event.command}")
            return [create_text_message(UNKNOWN_COMMAND_MESSAGE, main_menu_keyboard())]
        return await handler(event, session, user)

    if event.kind == EventKind.MENU:
        return await route_menu(event, session, user)

    if event.kind == EventKind.CALLBACK:
        return await route_idle_callback(event, session, user)

    return [create_text_message(USE_MENU_MESSAGE, main_menu_keyboard())]


async def route_idle_callback(
    event: InboundEvent,
    session: ConversationSession,
    user: Optional[User]
) -> List[Dict[str, Any]]:
    data = event.callback_data or ""

    if data.startswith(FILTER_CALLBACK_PREFIX):
        return await handle_filter_selected(event, session, user)

    if data == MORE_ADS_CALLBACK:
        return await handle_show_more(event, session, user)

    if data.startswith(CATEGORY_CALLBACK_PREFIX) or data == PUBLISH_WITHOUT_MEDIA_CALLBACK:
        logger.info(f"Stale submission button pressed: {data}")
    else:
        logger.warning(f"Unknown callback data: {data}")

    return [create_text_message(STALE_BUTTON_MESSAGE, main_menu_keyboard())]


async def acknowledge_callback(callback_id: str) -> None:
    try:
        await get_telegram_service().answer_callback_query(callback_id)
    except ExternalServiceError as e:
        logger.warning(f"Failed to answer callback query: {e}")


async def send_replies(chat_id: int, replies: List[Dict[str, Any]]) -> None:
    """
    Sends reply payloads in order. A failed send is logged and the rest
    are still attempted.
    """
    telegram = get_telegram_service()

    for payload in replies:
        try:
            await telegram.send_payload(chat_id, payload)
        except ExternalServiceError as e:
            logger.error(f"❌ Failed to send {payload.get('type', 'text')} message: {e}")
